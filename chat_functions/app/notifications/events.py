"""
Decoding of the Firestore document events delivered for newly created messages.

The platform posts the created document in Firestore's REST encoding, where
every field value is wrapped in a single-key object naming its type:

    {"value": {"name": "projects/p/databases/(default)/documents/privateChats/r1/messages/m1",
               "fields": {"senderId": {"stringValue": "u1"}, "text": {"stringValue": "hi"}}}}

CloudEvent deliveries wrap the same object under ``data``.
"""
import re
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel

from ..config import Settings
from ..errors import InvalidTriggerEvent
from ..schemas import Message


class MessageCreatedEvent(BaseModel):
    roomId: str
    messageId: str
    message: Optional[Message] = None

    @property
    def exists(self) -> bool:
        return self.message is not None


_FRACTION = re.compile(r"\.(\d+)")


def _parse_timestamp(raw: str) -> datetime:
    # RFC 3339 with up to nanosecond precision; datetime keeps microseconds
    raw = _FRACTION.sub(lambda m: '.' + m.group(1)[:6].ljust(6, '0'), raw, count=1)
    return datetime.fromisoformat(raw.replace('Z', '+00:00'))


def decode_value(value: Dict[str, Any]) -> Any:
    """Convert one Firestore REST typed value to a plain Python value."""
    if not isinstance(value, dict) or len(value) != 1:
        raise InvalidTriggerEvent(f"Malformed field value: {value!r}")
    kind, raw = next(iter(value.items()))
    if kind == 'nullValue':
        return None
    if kind in ('stringValue', 'referenceValue', 'bytesValue'):
        return raw
    if kind == 'booleanValue':
        return bool(raw)
    if kind == 'integerValue':
        # int64 values are sent as strings
        return int(raw)
    if kind == 'doubleValue':
        return float(raw)
    if kind == 'timestampValue':
        return _parse_timestamp(raw)
    if kind == 'geoPointValue':
        return {'latitude': raw.get('latitude'), 'longitude': raw.get('longitude')}
    if kind == 'arrayValue':
        return [decode_value(v) for v in raw.get('values', [])]
    if kind == 'mapValue':
        return decode_fields(raw.get('fields', {}))
    raise InvalidTriggerEvent(f"Unsupported field type: {kind}")


def decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {name: decode_value(value) for name, value in fields.items()}


def _document_pattern(settings: Settings) -> re.Pattern:
    return re.compile(
        rf"(?:^|/){re.escape(settings.rooms_collection)}/(?P<roomId>[^/]+)"
        rf"/{re.escape(settings.messages_collection)}/(?P<messageId>[^/]+)$"
    )


def parse_message_created_event(body: Dict[str, Any], settings: Settings) -> MessageCreatedEvent:
    """
    Build a MessageCreatedEvent from a document event body.

    Path parameters come from the document name. A body without a document
    value describes a record that no longer exists.

    Raises:
        InvalidTriggerEvent: If the body cannot be decoded or the document
            name is not a room message path
    """
    if not isinstance(body, dict):
        raise InvalidTriggerEvent("Event body must be a JSON object")
    # CloudEvent attributes sit beside ``data``, not inside it
    subject = body.get('subject') or body.get('document')
    if isinstance(body.get('data'), dict) and 'value' not in body:
        body = body['data']

    value = body.get('value') or {}
    if not isinstance(value, dict):
        raise InvalidTriggerEvent("Document value must be a JSON object")
    name = value.get('name') or subject or body.get('subject') or body.get('document') or ''
    if not isinstance(name, str):
        raise InvalidTriggerEvent(f"Document name must be a string: {name!r}")
    match = _document_pattern(settings).search(name)
    if match is None:
        raise InvalidTriggerEvent(f"Not a room message document: {name!r}")

    message = None
    if value:
        try:
            fields = decode_fields(value.get('fields', {}))
        except (ValueError, TypeError, AttributeError) as e:
            raise InvalidTriggerEvent(f"Undecodable fields in {name}: {e}") from e
        message = Message.from_document(fields)

    return MessageCreatedEvent(
        roomId=match.group('roomId'),
        messageId=match.group('messageId'),
        message=message,
    )
