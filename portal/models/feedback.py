"""Feedback model."""
from datetime import datetime, timezone
from portal.extensions import db

FEEDBACK_KINDS = ('complaint', 'compliment')


class Feedback(db.Model):
    __tablename__ = 'feedback'

    id = db.Column(db.Integer, primary_key=True)
    t_code = db.Column(db.String(50), nullable=False, index=True)
    kind = db.Column(db.String(20), nullable=False)  # complaint, compliment
    subject = db.Column(db.String(200))
    message = db.Column(db.Text, nullable=False)
    contact_email = db.Column(db.String(200))
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def to_payload(self):
        """Body sent to the notification function."""
        return {
            't_code': self.t_code,
            'kind': self.kind,
            'subject': self.subject,
            'message': self.message,
            'contact_email': self.contact_email,
            'id': self.id,
        }
