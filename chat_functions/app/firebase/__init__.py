from .data_store import FirestoreDataStore
from .firebase import FirebaseApp
from .push_gateway import FcmPushGateway
from .storage import FirebaseStorageObjectStore

__all__ = [
    "FcmPushGateway",
    "FirebaseApp",
    "FirebaseStorageObjectStore",
    "FirestoreDataStore",
]
