import asyncio
import logging
from typing import List, Optional

import firebase_admin
from firebase_admin import messaging

from ..clients import PushGateway
from ..notifications.schemas import MulticastRequest, MulticastSummary, TokenResult

logger = logging.getLogger(__name__)


class FcmPushGateway(PushGateway):
    """Firebase Cloud Messaging (FCM) multicast sender."""

    def __init__(self, app: Optional[firebase_admin.App] = None, batch_size: int = 500):
        self.app = app
        self.batch_size = batch_size

    async def send_multicast(self, request: MulticastRequest) -> MulticastSummary:
        """
        Send the notification to every token, splitting the token list into
        FCM-sized batches.

        Args:
            request: Tokens, notification block and data block

        Returns:
            Merged per-token outcome summary across all batches
        """
        summaries = []
        data = request.data.model_dump()
        for i in range(0, len(request.tokens), self.batch_size):
            batch = request.tokens[i:i + self.batch_size]
            message = messaging.MulticastMessage(
                tokens=batch,
                notification=messaging.Notification(
                    title=request.notification.title,
                    body=request.notification.body,
                ),
                data=data,
            )
            batch_response = await asyncio.to_thread(
                messaging.send_each_for_multicast, message, app=self.app
            )
            summaries.append(self._summarize(batch, batch_response))
            logger.debug(
                f"FCM batch of {len(batch)} tokens: "
                f"{batch_response.success_count} succeeded, {batch_response.failure_count} failed"
            )
        return MulticastSummary.merge(summaries)

    @staticmethod
    def _summarize(tokens: List[str], batch_response: messaging.BatchResponse) -> MulticastSummary:
        results = []
        for token, resp in zip(tokens, batch_response.responses):
            error_code = None
            if not resp.success and resp.exception is not None:
                error_code = getattr(resp.exception, 'code', None) or type(resp.exception).__name__
            results.append(TokenResult(
                token=token,
                success=resp.success,
                messageId=resp.message_id,
                errorCode=error_code,
            ))
        return MulticastSummary(
            successCount=batch_response.success_count,
            failureCount=batch_response.failure_count,
            responses=results,
        )
