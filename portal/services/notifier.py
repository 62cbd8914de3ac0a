"""Client for the outbound feedback notification function."""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationOutcome:
    """Result of the best-effort notification step. Never an exception."""

    delivered: bool
    detail: Optional[str] = None
    hint: Optional[str] = None


class FeedbackNotifier:
    def __init__(self, url, timeout=10.0):
        self.url = url
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(config.get('FEEDBACK_FUNCTION_URL'), config.get('FEEDBACK_FUNCTION_TIMEOUT', 10.0))

    def notify(self, feedback):
        if not self.url:
            return NotificationOutcome(False, detail='Notification function not configured')

        try:
            response = httpx.post(self.url, json=feedback.to_payload(), timeout=self.timeout)
        except httpx.HTTPError as exc:
            logger.warning('Notification function unreachable: %s', exc)
            return NotificationOutcome(False, detail=str(exc))

        if response.is_success:
            logger.info('Feedback %s notification sent', feedback.id)
            return NotificationOutcome(True)

        detail, hint = f'HTTP {response.status_code}', None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get('error') or detail
            hint = body.get('hint')
        logger.warning('Notification function failed for feedback %s: %s', feedback.id, detail)
        return NotificationOutcome(False, detail=detail, hint=hint)
