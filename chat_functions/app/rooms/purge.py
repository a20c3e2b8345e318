import asyncio
import logging
from typing import Any, List, Optional

from ..clients import Clients, ObjectStore
from ..config import Settings, settings as default_settings
from ..errors import CallableError, ErrorKind, ObjectNotFound
from ..schemas import NotFound
from .schemas import ROOM_MISSING, PurgeResult

logger = logging.getLogger(__name__)


def normalize_paths(raw: Any) -> List[str]:
    """Trimmed, non-empty path strings. Anything that is not a list yields no paths."""
    if not isinstance(raw, list):
        return []
    paths = []
    for entry in raw:
        if not isinstance(entry, str):
            continue
        path = entry.strip()
        if path:
            paths.append(path)
    return paths


def chunk(items: List[str], size: int) -> List[List[str]]:
    return [items[i:i + size] for i in range(0, len(items), size)]


async def _delete_path(object_store: ObjectStore, path: str) -> bool:
    """Delete one object. True when it is gone afterwards, False when it was skipped."""
    try:
        await object_store.delete_object(path)
    except ObjectNotFound:
        return True
    except Exception as e:
        logger.error(f"Failed to delete {path}: {str(e)}")
        return False
    return True


def _validated_room_id(data: Any) -> str:
    room_id = data.get('roomId') if isinstance(data, dict) else None
    if not isinstance(room_id, str) or not room_id.strip():
        raise CallableError(ErrorKind.INVALID_ARGUMENT, "roomId is required")
    return room_id.strip()


async def purge_room_objects(
    caller_uid: Optional[str],
    data: Any,
    clients: Clients,
    settings: Settings = default_settings,
) -> PurgeResult:
    """
    Delete caller-supplied storage paths belonging to a room.

    Deletions run in sequential batches; the paths of one batch are deleted
    concurrently. Missing objects count as deleted. Other per-path failures
    are logged and counted as skipped.

    Args:
        caller_uid: Authenticated uid of the caller, None when unauthenticated
        data: Request payload ``{"roomId": str, "paths": [str]}``
        clients: Shared service handles
        settings: Batch size settings

    Returns:
        PurgeResult with deleted / skipped tallies, or the room_missing result

    Raises:
        CallableError: unauthenticated, invalid-argument or permission-denied
            for bad requests; internal for anything unexpected
    """
    try:
        if not caller_uid:
            raise CallableError(ErrorKind.UNAUTHENTICATED, "Authentication required")

        room_id = _validated_room_id(data)

        room_lookup = await clients.data_store.get_room(room_id)
        if isinstance(room_lookup, NotFound):
            logger.info(f"Room {room_id} no longer exists, nothing to purge")
            return PurgeResult(reason=ROOM_MISSING)

        if not room_lookup.record.has_participant(caller_uid):
            logger.warning(f"User {caller_uid} is not a participant in room {room_id}")
            raise CallableError(ErrorKind.PERMISSION_DENIED, "Not a participant of this room")

        paths = normalize_paths(data.get('paths'))
        deleted = 0
        skipped = 0
        for batch in chunk(paths, settings.purge_batch_size):
            outcomes = await asyncio.gather(
                *(_delete_path(clients.object_store, path) for path in batch)
            )
            batch_deleted = sum(1 for ok in outcomes if ok)
            deleted += batch_deleted
            skipped += len(outcomes) - batch_deleted

        logger.info(f"Purged room {room_id} for {caller_uid}: {deleted} deleted, {skipped} skipped")
        return PurgeResult(deleted=deleted, skipped=skipped)

    except CallableError:
        raise
    except Exception as e:
        logger.error(f"Error purging room objects: {str(e)}", exc_info=True)
        raise CallableError(ErrorKind.INTERNAL, "Failed to purge room objects") from e
