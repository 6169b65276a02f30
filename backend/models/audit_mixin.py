from sqlalchemy import Column, DateTime

from utils.formatting import now_local


class TimestampMixin:
    """Mixin that provides a creation timestamp.

    Timestamps are timezone-aware and generated in the service timezone
    (APP_TIMEZONE). Rows that are never edited (users, repackaging events)
    only need the creation time.
    """
    created_at = Column(DateTime(timezone=True), default=now_local, nullable=False)
