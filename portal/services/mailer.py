"""Email delivery for the feedback notification function (Resend HTTP API)."""
import logging
from dataclasses import dataclass

import httpx

from portal.services.feedback import KIND_LABELS, email_subject

logger = logging.getLogger(__name__)


class MailerNotConfigured(Exception):
    def __init__(self, error, hint):
        super().__init__(error)
        self.error = error
        self.hint = hint


class MailDeliveryError(Exception):
    pass


@dataclass(frozen=True)
class FeedbackEmail:
    subject: str
    text: str


def compose_feedback_email(payload):
    """Subject and plain-text body for a feedback notification payload."""
    lines = [
        f"Tipo: {KIND_LABELS.get(payload['kind'], payload['kind'])}",
        f"Código: {payload['t_code']}",
    ]
    if payload.get('contact_email'):
        lines.append(f"Contato: {payload['contact_email']}")
    if payload.get('id'):
        lines.append(f"ID: {payload['id']}")
    lines.extend(['', payload['message']])
    return FeedbackEmail(
        subject=email_subject(payload['kind'], payload.get('subject'), payload['t_code']),
        text='\n'.join(lines),
    )


class ResendMailer:
    def __init__(self, api_key, sender, recipient, api_url='https://api.resend.com/emails', timeout=10.0):
        self.api_key = api_key
        self.sender = sender
        self.recipient = recipient
        self.api_url = api_url
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            api_key=config.get('RESEND_API_KEY'),
            sender=config.get('RESEND_FROM'),
            recipient=config.get('FEEDBACK_RECIPIENT'),
            api_url=config.get('RESEND_API_URL', 'https://api.resend.com/emails'),
            timeout=config.get('FEEDBACK_FUNCTION_TIMEOUT', 10.0),
        )

    def ensure_configured(self):
        if not self.api_key:
            raise MailerNotConfigured(
                'Email provider not configured',
                'Set RESEND_API_KEY (and configure a verified sender) to enable emails.',
            )
        if not self.sender:
            raise MailerNotConfigured(
                'Missing RESEND_FROM',
                'Set RESEND_FROM to a verified sender (e.g. no-reply@yourdomain.com).',
            )

    def send(self, email):
        self.ensure_configured()
        try:
            response = httpx.post(
                self.api_url,
                headers={'Authorization': f'Bearer {self.api_key}'},
                json={
                    'from': self.sender,
                    'to': [self.recipient],
                    'subject': email.subject,
                    'text': email.text,
                },
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise MailDeliveryError(str(exc)) from exc
        if not response.is_success:
            raise MailDeliveryError(response.text)
        logger.info('Feedback email sent to %s', self.recipient)
