from typing import Optional

from pydantic import PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration settings for the chat functions service"""

    # Application settings
    service_name: str = "chat-functions"
    log_level: str = "INFO"
    environment: str = "prod"

    # Firebase settings
    firebase_secret: Optional[str] = None
    firebase_storage_bucket: Optional[str] = None

    # Firestore layout
    rooms_collection: str = "privateChats"
    messages_collection: str = "messages"
    users_collection: str = "users"

    # Object store settings ("firebase" or "s3")
    object_store_backend: str = "firebase"
    aws_region: str = "ap-southeast-1"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_s3_bucket_name: str = "mw-chat-media"

    # Notification content
    fallback_title: str = "New message"
    fallback_body: str = "New message in MW Chat"
    notification_type: str = "private_message"

    # FCM batching settings
    fcm_batch_size: PositiveInt = 500  # FCM allows up to 500 tokens per multicast request

    # Purge settings
    purge_batch_size: PositiveInt = 50

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def is_dev_environment(self) -> bool:
        return self.environment.upper() == "DEV"


settings = Settings()

