"""Custom SQLAlchemy column types."""

import json

from sqlalchemy import Text, TypeDecorator


class JSONList(TypeDecorator):
    """List column stored as JSON text.

    Works the same on SQLite and PostgreSQL. ``None`` is stored as NULL and
    tuples/sets are written as plain JSON arrays.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise TypeError(f"JSONList expects a sequence, got {type(value).__name__}")
        return json.dumps(list(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return list(json.loads(value))
