"""Outbound notification function - emails client feedback to the team."""
import logging

from flask import Blueprint, current_app, g, jsonify, request

from portal.errors import BackendError
from portal.models import AuthorizedCode, FEEDBACK_KINDS
from portal.services.mailer import MailDeliveryError, MailerNotConfigured, ResendMailer, compose_feedback_email

functions_bp = Blueprint('functions', __name__, url_prefix='/functions')
logger = logging.getLogger(__name__)


def _error(message, status, **extra):
    return jsonify(error=message, **extra), status


@functions_bp.route('/send-feedback-email', methods=['POST'])
def send_feedback_email():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return _error('Invalid JSON', 400)

    if not payload.get('t_code') or not payload.get('kind') or not payload.get('message'):
        return _error('Missing required fields', 400)
    if payload['kind'] not in FEEDBACK_KINDS:
        return _error('Missing required fields', 400)

    if current_app.config['FEEDBACK_FUNCTION_VALIDATE_CODE']:
        try:
            code = g.gateway.first(AuthorizedCode, t_code=payload['t_code'])
        except BackendError:
            return _error('Code validation failed', 400)
        if code is None or not code.is_active:
            return _error('Invalid or inactive code', 400)

    mailer = ResendMailer.from_config(current_app.config)
    try:
        mailer.send(compose_feedback_email(payload))
    except MailerNotConfigured as exc:
        return _error(exc.error, 501, hint=exc.hint)
    except MailDeliveryError as exc:
        logger.warning('Feedback email delivery failed: %s', exc)
        return _error('Failed to send email', 502, details=str(exc))

    return jsonify(ok=True)
