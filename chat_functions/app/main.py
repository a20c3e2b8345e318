import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .clients import Clients
from .config import settings
from .errors import CallableError
from .logging_config import setup_logging
from .notifications.router import router as notifications_router
from .rooms.router import router as rooms_router

logger = logging.getLogger(__name__)


def create_app(clients: Optional[Clients] = None) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        clients: Service handles to use. When omitted they are built from
            settings once, at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings)
        if clients is None:
            # Imported here so tests with injected clients never touch Firebase
            from .bootstrap import build_clients
            app.state.clients = build_clients(settings)
        else:
            app.state.clients = clients
        logger.info(f"{settings.service_name} started in {settings.environment} environment")
        yield

    app = FastAPI(title="Chat Functions", version="1.0.0", lifespan=lifespan)

    @app.exception_handler(CallableError)
    async def callable_error_handler(request: Request, exc: CallableError):
        return JSONResponse(status_code=exc.kind.http_status, content={"error": exc.to_dict()})

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    app.include_router(notifications_router)
    app.include_router(rooms_router)
    return app


def run() -> None:
    """Console entry point: serve the application with uvicorn."""
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8080, log_config=None)


if __name__ == "__main__":
    run()
