"""Feedback submission: durable write first, best-effort notification second.

The two steps have separate result types. A failed insert raises and stops
the flow; a failed notification only yields a
:class:`~portal.services.notifier.NotificationOutcome` with
``delivered=False`` and never undoes the insert.
"""
from dataclasses import dataclass
from urllib.parse import quote

from portal.errors import ValidationError
from portal.models import Feedback, FEEDBACK_KINDS
from portal.services.notifier import NotificationOutcome

KIND_LABELS = {'complaint': 'Reclamação', 'compliment': 'Elogio'}
SUBJECT_PREFIX = '[Portal Prime]'


@dataclass(frozen=True)
class FeedbackReceipt:
    feedback: Feedback
    notification: NotificationOutcome


def _optional(value):
    value = (value or '').strip()
    return value or None


def record_feedback(gateway, t_code, kind, message, subject=None, contact_email=None):
    """Validate and insert one Feedback row. Raises BackendError on failure."""
    message = (message or '').strip()
    if not message:
        raise ValidationError('message is required')
    if kind not in FEEDBACK_KINDS:
        raise ValidationError(f'unknown feedback kind: {kind!r}')
    if not t_code:
        raise ValidationError('t_code is required')

    return gateway.insert(Feedback, {
        't_code': t_code,
        'kind': kind,
        'subject': _optional(subject),
        'message': message,
        'contact_email': _optional(contact_email),
    })


def submit_feedback(gateway, notifier, t_code, kind, message, subject=None, contact_email=None):
    feedback = record_feedback(gateway, t_code, kind, message, subject=subject, contact_email=contact_email)
    return FeedbackReceipt(feedback=feedback, notification=notifier.notify(feedback))


def email_subject(kind, subject=None, t_code=None):
    text = f'{SUBJECT_PREFIX} {KIND_LABELS.get(kind, kind)}'
    if subject:
        text += f' - {subject}'
    if t_code:
        text += f' (Código {t_code})'
    return text


def build_mailto_link(recipient, t_code, kind, message, subject=None):
    """Manual fallback offered when the notification could not be sent."""
    body = f'Código: {t_code}\n\n{message}'
    return f'mailto:{recipient}?subject={quote(email_subject(kind, subject))}&body={quote(body)}'
