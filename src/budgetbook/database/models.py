"""SQLAlchemy models for budgetbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Index,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LineItem(Base):
    """Line item model. Groups and children share the table via parent_id."""

    __tablename__ = "line_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False)
    profile_id = Column(String, nullable=True)
    kind = Column(String(16), nullable=False)
    name = Column(String(120), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    period = Column(String(7), nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    scheduled_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    category_id = Column(String, nullable=True)
    parent_id = Column(Integer, ForeignKey("line_items.id", ondelete="CASCADE"), nullable=True)
    is_group = Column(Boolean, default=False, nullable=False)
    valuation_mode = Column(String(8), default="sum", nullable=False)
    series_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_line_items_user_period", "user_id", "period"),
        Index("ix_line_items_profile_period", "profile_id", "period"),
        Index("ix_line_items_parent", "parent_id"),
        Index("ix_line_items_series", "series_id"),
    )


class Category(Base):
    """User-defined category model. Built-in categories are not stored."""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True)
    user_id = Column(String, nullable=False)
    profile_id = Column(String, nullable=True)
    name = Column(String(50), nullable=False)
    kind = Column(String(16), nullable=False)
    icon = Column(String, nullable=True)
    color = Column(String, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


def _enable_sqlite_pragmas(dbapi_conn, _record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON;")
    cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    if database_url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_pragmas)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
