from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class NotifyStatus(str, Enum):
    SENT = "sent"
    NO_RECORD = "no_record"
    ROOM_MISSING = "room_missing"
    NO_RECEIVERS = "no_receivers"
    NO_TOKENS = "no_tokens"


class NotificationContent(BaseModel):
    title: str
    body: str


class NotificationData(BaseModel):
    """Data payload delivered alongside a private message notification"""
    roomId: str
    senderId: str = ""
    type: str


class MulticastRequest(BaseModel):
    tokens: List[str]
    notification: NotificationContent
    data: NotificationData


class TokenResult(BaseModel):
    token: str
    success: bool
    messageId: Optional[str] = None
    errorCode: Optional[str] = None


class MulticastSummary(BaseModel):
    successCount: int = 0
    failureCount: int = 0
    responses: List[TokenResult] = []

    @classmethod
    def merge(cls, summaries: List["MulticastSummary"]) -> "MulticastSummary":
        merged = cls()
        for summary in summaries:
            merged.successCount += summary.successCount
            merged.failureCount += summary.failureCount
            merged.responses.extend(summary.responses)
        return merged

    def to_log_dict(self) -> Dict[str, Any]:
        failures = [
            {'token': r.token, 'errorCode': r.errorCode}
            for r in self.responses if not r.success
        ]
        return {
            'successCount': self.successCount,
            'failureCount': self.failureCount,
            'failures': failures,
        }


class NotifyResult(BaseModel):
    status: NotifyStatus
    roomId: str
    recipients: int = 0
    summary: Optional[MulticastSummary] = None
