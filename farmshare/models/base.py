from datetime import datetime, timezone

from sqlalchemy import BigInteger, Integer

from farmshare.extensions import db

# Ids are BIGINT on Postgres; SQLite only autoincrements a plain INTEGER key.
PKType = BigInteger().with_variant(Integer, "sqlite")


def utcnow():
    return datetime.now(timezone.utc)


def isoformat_or_none(value):
    return value.isoformat() if value is not None else None


class TimestampMixin:
    """Row creation and last-write times, both UTC.

    Farmers keep ``updated_at == created_at`` forever; equipment and booking
    rows move it on every status flip.
    """

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
