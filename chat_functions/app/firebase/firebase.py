import json
import logging
from typing import Optional

import firebase_admin
import google.cloud.firestore
from firebase_admin import credentials, firestore, storage

from ..config import Settings

logger = logging.getLogger(__name__)


class FirebaseApp:
    """Handle on the Firebase Admin app and the service clients derived from it."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.app: Optional[firebase_admin.App] = None
        self.firestore_db: Optional[google.cloud.firestore.Client] = None
        self.connect()

    def connect(self) -> None:
        try:
            # Try to get the existing default app
            self.app = firebase_admin.get_app()
            logger.info("Retrieved existing Firebase app")
        except ValueError:
            options = {}
            if self.settings.firebase_storage_bucket:
                options["storageBucket"] = self.settings.firebase_storage_bucket
            self.app = firebase_admin.initialize_app(
                credential=self._load_credential(),
                options=options or None,
            )
            logger.info(f"Initialized Firebase app: {self.app.name}")
        self.firestore_db = firestore.client(self.app)

    def _load_credential(self) -> credentials.Base:
        cert_json = self.settings.firebase_secret
        if not cert_json:
            # Running on Google infrastructure or with GOOGLE_APPLICATION_CREDENTIALS set
            logger.info("FIREBASE_SECRET not set, using application default credentials")
            return credentials.ApplicationDefault()
        cert_dict = json.loads(cert_json)
        if isinstance(cert_dict, str):
            cert_dict = json.loads(cert_dict)
        return credentials.Certificate(cert_dict)

    def get_firestore_db(self) -> google.cloud.firestore.Client:
        return self.firestore_db

    def get_bucket(self):
        """Return the default storage bucket, or the configured one."""
        return storage.bucket(name=self.settings.firebase_storage_bucket, app=self.app)
