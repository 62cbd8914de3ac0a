"""Logging setup for the portal."""
import json
import logging
import logging.config
from datetime import datetime, timezone


class JsonLogFormatter(logging.Formatter):
    """Format log records as single-line JSON payloads."""

    def format(self, record):
        payload = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)
        for attr in ('t_code', 'user_id', 'view'):
            if hasattr(record, attr):
                payload[attr] = getattr(record, attr)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(app):
    """Install a single stream handler on the root logger.

    ``LOG_FORMAT=json`` switches to JSON lines; anything else keeps the
    plain development format.
    """
    formatter = 'json' if app.config.get('LOG_FORMAT') == 'json' else 'plain'
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'plain': {'format': '[%(asctime)s] %(levelname)s in %(name)s: %(message)s'},
            'json': {'()': JsonLogFormatter},
        },
        'handlers': {
            'wsgi': {
                'class': 'logging.StreamHandler',
                'stream': 'ext://flask.logging.wsgi_errors_stream',
                'formatter': formatter,
            },
        },
        'root': {
            'level': app.config.get('LOG_LEVEL', 'INFO').upper(),
            'handlers': ['wsgi'],
        },
    })
    logging.getLogger('httpx').setLevel(logging.WARNING)
