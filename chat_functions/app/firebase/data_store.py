import asyncio
import logging

import google.cloud.firestore

from ..clients import DataStore
from ..config import Settings
from ..schemas import Found, Lookup, NotFound, Room, UserProfile

logger = logging.getLogger(__name__)


class FirestoreDataStore(DataStore):
    """Rooms live at ``privateChats/{roomId}``, profiles at ``users/{userId}``."""

    def __init__(self, firestore_db: google.cloud.firestore.Client, settings: Settings):
        self.firestore_db = firestore_db
        self.rooms_collection = settings.rooms_collection
        self.users_collection = settings.users_collection

    async def get_room(self, room_id: str) -> Lookup[Room]:
        room_ref = self.firestore_db.collection(self.rooms_collection).document(room_id)
        # Sync Firestore client, keep it off the event loop
        snapshot = await asyncio.to_thread(room_ref.get)
        if not snapshot.exists:
            logger.debug(f"Room {room_id} not found")
            return NotFound(room_id)
        return Found(Room.from_document(room_id, snapshot.to_dict()))

    async def get_user_profile(self, user_id: str) -> Lookup[UserProfile]:
        user_ref = self.firestore_db.collection(self.users_collection).document(user_id)
        snapshot = await asyncio.to_thread(user_ref.get)
        if not snapshot.exists:
            logger.debug(f"User profile {user_id} not found")
            return NotFound(user_id)
        return Found(UserProfile.from_document(user_id, snapshot.to_dict()))
