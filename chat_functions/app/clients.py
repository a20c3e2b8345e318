"""
Interfaces of the external services the handlers talk to, and the container
that carries one shared instance of each into every invocation.
"""
from abc import ABC, abstractmethod

from .notifications.schemas import MulticastRequest, MulticastSummary
from .schemas import Lookup, Room, UserProfile


class DataStore(ABC):
    """Read access to rooms and user profiles."""

    @abstractmethod
    async def get_room(self, room_id: str) -> Lookup[Room]:
        raise NotImplementedError

    @abstractmethod
    async def get_user_profile(self, user_id: str) -> Lookup[UserProfile]:
        raise NotImplementedError


class PushGateway(ABC):
    """Multicast push delivery."""

    @abstractmethod
    async def send_multicast(self, request: MulticastRequest) -> MulticastSummary:
        """
        Send one notification to every token in the request.

        Returns:
            Per-token outcome summary. Token-level failures are reported in the
            summary, not raised.
        """
        raise NotImplementedError


class ObjectStore(ABC):
    """Deletion of stored objects by path."""

    @abstractmethod
    async def delete_object(self, path: str) -> None:
        """
        Delete one object.

        Raises:
            ObjectNotFound: If no object exists at ``path``.
        """
        raise NotImplementedError


class Clients:
    """Shared service handles, built once at startup and passed to handlers."""

    def __init__(self, data_store: DataStore, object_store: ObjectStore, push_gateway: PushGateway):
        self.data_store = data_store
        self.object_store = object_store
        self.push_gateway = push_gateway
