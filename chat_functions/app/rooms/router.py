import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from ..clients import Clients
from ..config import settings
from ..dependencies import get_caller_uid, get_clients
from .purge import purge_room_objects
from .schemas import CallableRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/callable", tags=["Callable"])


@router.post('/purgeRoomObjects')
async def purge_room_objects_callable(
    request: CallableRequest,
    caller_uid: Annotated[Optional[str], Depends(get_caller_uid)],
    clients: Annotated[Clients, Depends(get_clients)],
):
    """
    Delete storage objects of a room on behalf of one of its participants.

    Request body follows the callable protocol: ``{"data": {"roomId": ..., "paths": [...]}}``.
    The result is returned under ``result``; typed errors are rendered by the
    application's CallableError handler.
    """
    result = await purge_room_objects(caller_uid, request.data, clients, settings)
    return {"result": result.to_response()}
