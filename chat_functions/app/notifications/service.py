import asyncio
import json
import logging
from typing import List, Optional

from ..clients import Clients, DataStore
from ..config import Settings, settings as default_settings
from ..schemas import Found, Lookup, Message, NotFound, UserProfile
from .events import MessageCreatedEvent
from .schemas import (
    MulticastRequest,
    NotificationContent,
    NotificationData,
    NotifyResult,
    NotifyStatus,
)

logger = logging.getLogger(__name__)


def resolve_receivers(participants: List[str], sender_id: Optional[str]) -> List[str]:
    """
    Participants other than the sender, in room order.

    Only ids exactly equal to ``sender_id`` are removed. When the message has
    no sender id, nobody is excluded unless a participant id is itself empty.
    """
    excluded = sender_id if sender_id is not None else ""
    return [uid for uid in participants if uid != excluded]


def compose_title(sender: Lookup[UserProfile], fallback: str) -> str:
    if isinstance(sender, Found):
        name = sender.record.display_name
        if name:
            return name
    return fallback


def compose_body(message: Message, fallback: str) -> str:
    if message.text is not None:
        text = message.text.strip()
        if text:
            return text
    return fallback


def collect_tokens(profiles: List[Lookup[UserProfile]]) -> List[str]:
    """Push tokens of the receivers that have one. Missing profiles and tokens are skipped."""
    tokens = []
    for lookup in profiles:
        if isinstance(lookup, Found) and lookup.record.push_token is not None:
            tokens.append(lookup.record.push_token)
    return tokens


async def _fetch_sender(data_store: DataStore, sender_id: Optional[str]) -> Lookup[UserProfile]:
    if not sender_id:
        return NotFound("")
    return await data_store.get_user_profile(sender_id)


async def notify_on_message_created(
    event: MessageCreatedEvent,
    clients: Clients,
    settings: Settings = default_settings,
) -> NotifyResult:
    """
    Send a push notification for a newly created private message to every
    room participant except its sender.

    Every early exit (missing record, missing room, no receivers, no push
    tokens) completes successfully without side effects. Data-store and
    gateway errors propagate to the caller.

    Args:
        event: The created message and its path parameters
        clients: Shared service handles
        settings: Notification content settings

    Returns:
        NotifyResult describing which branch the invocation took
    """
    room_id = event.roomId

    if not event.exists:
        logger.info(f"No snapshot data for message {event.messageId} in room {room_id}, exiting")
        return NotifyResult(status=NotifyStatus.NO_RECORD, roomId=room_id)

    message = event.message
    logger.info(f"New message {event.messageId} in room {room_id} from {message.senderId}")

    room_lookup = await clients.data_store.get_room(room_id)
    if isinstance(room_lookup, NotFound):
        logger.warning(f"Room document missing for {room_id}")
        return NotifyResult(status=NotifyStatus.ROOM_MISSING, roomId=room_id)

    receiver_ids = resolve_receivers(room_lookup.record.participants, message.senderId)
    if not receiver_ids:
        logger.info(f"No receivers for room {room_id}")
        return NotifyResult(status=NotifyStatus.NO_RECEIVERS, roomId=room_id)

    # All lookups must finish before composing; any failure fails the invocation
    sender_lookup, *receiver_lookups = await asyncio.gather(
        _fetch_sender(clients.data_store, message.senderId),
        *(clients.data_store.get_user_profile(uid) for uid in receiver_ids),
    )

    tokens = collect_tokens(receiver_lookups)
    if not tokens:
        logger.info(f"No FCM tokens for receivers in room {room_id}")
        return NotifyResult(status=NotifyStatus.NO_TOKENS, roomId=room_id)

    request = MulticastRequest(
        tokens=tokens,
        notification=NotificationContent(
            title=compose_title(sender_lookup, settings.fallback_title),
            body=compose_body(message, settings.fallback_body),
        ),
        data=NotificationData(
            roomId=room_id,
            senderId=message.senderId if message.senderId is not None else "",
            type=settings.notification_type,
        ),
    )
    summary = await clients.push_gateway.send_multicast(request)

    logger.info(f"FCM send result for room {room_id}: {json.dumps(summary.to_log_dict())}")
    return NotifyResult(
        status=NotifyStatus.SENT,
        roomId=room_id,
        recipients=len(tokens),
        summary=summary,
    )
