"""
Records read from the document database, and the lookup result wrapper
returned by every data-store fetch.
"""
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict

T = TypeVar('T')


@dataclass(frozen=True)
class Found(Generic[T]):
    """A fetch that located its record."""
    record: T


@dataclass(frozen=True)
class NotFound:
    """A fetch whose record does not exist."""
    key: str


Lookup = Union[Found[T], NotFound]


def _string_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class Room(BaseModel):
    model_config = ConfigDict(extra="ignore")

    roomId: str
    participants: List[str] = []

    @classmethod
    def from_document(cls, room_id: str, data: Optional[Dict[str, Any]]) -> "Room":
        data = data if data is not None else {}
        raw = data.get('participants')
        participants = [p for p in raw if isinstance(p, str)] if isinstance(raw, list) else []
        return cls(roomId=room_id, participants=participants)

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participants


class Message(BaseModel):
    model_config = ConfigDict(extra="ignore")

    senderId: Optional[str] = None
    text: Optional[str] = None

    @classmethod
    def from_document(cls, data: Optional[Dict[str, Any]]) -> "Message":
        data = data if data is not None else {}
        return cls(
            senderId=_string_or_none(data.get('senderId')),
            text=_string_or_none(data.get('text')),
        )


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    userId: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    fcmToken: Optional[str] = None

    @classmethod
    def from_document(cls, user_id: str, data: Optional[Dict[str, Any]]) -> "UserProfile":
        data = data if data is not None else {}
        return cls(
            userId=user_id,
            firstName=_string_or_none(data.get('firstName')),
            lastName=_string_or_none(data.get('lastName')),
            fcmToken=_string_or_none(data.get('fcmToken')),
        )

    @property
    def display_name(self) -> str:
        """First and last name joined by a space, trimmed. Empty when neither is set."""
        first = self.firstName if self.firstName is not None else ""
        last = self.lastName if self.lastName is not None else ""
        return f"{first} {last}".strip()

    @property
    def push_token(self) -> Optional[str]:
        """The registered FCM token, or None when absent or empty."""
        if self.fcmToken is None or len(self.fcmToken) == 0:
            return None
        return self.fcmToken
