import logging

from .aws import S3ObjectStore
from .clients import Clients, ObjectStore
from .config import Settings
from .firebase import FcmPushGateway, FirebaseApp, FirebaseStorageObjectStore, FirestoreDataStore

logger = logging.getLogger(__name__)


def build_object_store(settings: Settings, firebase_app: FirebaseApp) -> ObjectStore:
    backend = settings.object_store_backend.lower()
    if backend == "firebase":
        return FirebaseStorageObjectStore(firebase_app.get_bucket())
    if backend == "s3":
        return S3ObjectStore(settings)
    raise ValueError(f"Unknown object store backend: {settings.object_store_backend}")


def build_clients(settings: Settings) -> Clients:
    """Connect to Firebase and build the shared service handles."""
    firebase_app = FirebaseApp(settings)
    clients = Clients(
        data_store=FirestoreDataStore(firebase_app.get_firestore_db(), settings),
        object_store=build_object_store(settings, firebase_app),
        push_gateway=FcmPushGateway(firebase_app.app, batch_size=settings.fcm_batch_size),
    )
    logger.info(f"Service clients ready (object store backend: {settings.object_store_backend})")
    return clients
