import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ..clients import Clients
from ..config import settings
from ..dependencies import get_clients
from ..errors import InvalidTriggerEvent
from .events import parse_message_created_event
from .service import notify_on_message_created

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/triggers", tags=["Triggers"])


@router.post('/message-created')
async def on_message_created(
    body: Annotated[Dict[str, Any], Body()],
    clients: Annotated[Clients, Depends(get_clients)],
):
    """
    Receive a Firestore document event for a created room message and push a
    notification to the other participants.

    Handler failures are left to propagate as a 500 so the platform can retry
    the delivery.
    """
    try:
        event = parse_message_created_event(body, settings)
    except InvalidTriggerEvent as e:
        logger.error(f"Rejected message-created event: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    result = await notify_on_message_created(event, clients, settings)
    return {"status": "ok", "result": result.status.value}
