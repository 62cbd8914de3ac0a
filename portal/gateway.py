"""Backend gateway - generic tabular CRUD over the database session.

Every read and write in the portal goes through :class:`Gateway`. It offers
the small query protocol the rest of the code relies on (equality filters,
ordering by one or more columns, an optional row limit, insert/update/delete
by id and upsert by key) and turns SQLAlchemy failures into
:class:`~portal.errors.BackendError` after rolling the session back.

Each mutation commits on its own. Nothing here is transactional across calls.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from portal.errors import BackendError
from portal.extensions import db

logger = logging.getLogger(__name__)


class Gateway:
    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    # ==================== Reads ====================

    def select(self, model, filters=None, order_by=(), limit=None):
        """Return rows of ``model`` matching every ``filters`` equality.

        ``order_by`` is a sequence of column names; a leading ``-`` sorts
        that column descending.
        """
        query = select(model)
        for column, value in (filters or {}).items():
            query = query.where(_column(model, column) == value)
        for key in order_by:
            column = _column(model, key.lstrip('-'))
            query = query.order_by(column.desc() if key.startswith('-') else column.asc())
        if limit is not None:
            query = query.limit(limit)
        return self._run(lambda: list(self.session.scalars(query)))

    def first(self, model, **filters):
        rows = self.select(model, filters=filters, limit=1)
        return rows[0] if rows else None

    def get(self, model, record_id):
        return self._run(lambda: self.session.get(model, record_id))

    # ==================== Writes ====================

    def insert(self, model, values):
        def op():
            record = model(**values)
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
            return record
        return self._run(op, write=True)

    def update(self, model, record_id, values):
        """Apply ``values`` to the row with ``record_id``. Returns None if missing."""
        def op():
            record = self.session.get(model, record_id)
            if record is None:
                return None
            for column, value in values.items():
                _column(model, column)
                setattr(record, column, value)
            self.session.commit()
            self.session.refresh(record)
            return record
        return self._run(op, write=True)

    def delete(self, model, record_id):
        def op():
            record = self.session.get(model, record_id)
            if record is None:
                return False
            self.session.delete(record)
            self.session.commit()
            return True
        return self._run(op, write=True)

    def upsert(self, model, key, values):
        """Insert or update the row whose ``key`` column equals ``values[key]``."""
        def op():
            existing = self.session.scalars(
                select(model).where(_column(model, key) == values[key]).limit(1)
            ).first()
            if existing is None:
                existing = model(**values)
                self.session.add(existing)
            else:
                for column, value in values.items():
                    setattr(existing, column, value)
            self.session.commit()
            self.session.refresh(existing)
            return existing
        return self._run(op, write=True)

    # ==================== Internals ====================

    def _run(self, op, write=False):
        try:
            return op()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning('Backend %s failed: %s', 'write' if write else 'read', exc)
            raise BackendError(str(exc)) from exc


def _column(model, name):
    column = getattr(model, name, None)
    if column is None or not hasattr(column, 'desc'):
        raise ValueError(f'{model.__name__} has no column {name!r}')
    return column
