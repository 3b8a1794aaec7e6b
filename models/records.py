"""SQLAlchemy mapping of the content-store tables the generator touches.

The schema itself is owned by the surrounding web application; only the
columns read (or, for ``scrapbook_files``, written) here are declared.
"""
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Event(Base):
    __tablename__ = "events"

    event_id = Column(Integer, primary_key=True)
    event_name = Column(String, nullable=False)
    event_date = Column(DateTime, nullable=True)


class Photo(Base):
    __tablename__ = "photos"

    photo_id = Column(Integer, primary_key=True)
    event_id = Column(Integer, nullable=True)
    filename = Column(String, nullable=True)
    s3_url = Column(String, nullable=True)


class BlogPost(Base):
    __tablename__ = "blog_posts"

    blog_post_id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=True)
    featured_image = Column(String, nullable=True)  # "/api/blog-images/<file>/preview"
    images = Column(JSON, nullable=True)            # list of the same URL shape


class ScrapbookContent(Base):
    """Ordering metadata written by the journal editor; read-only here."""

    __tablename__ = "scrapbook_content"

    id = Column(Integer, primary_key=True)
    year = Column(Integer, nullable=False, index=True)
    content_type = Column(String, nullable=False)
    content_reference = Column(Text, nullable=False)
    display_order = Column(Integer, nullable=False)
    page_break_before = Column(Boolean, nullable=False, default=False)
    page_break_after = Column(Boolean, nullable=False, default=False)


class ScrapbookFile(Base):
    """One row per generated year, upserted after each successful run."""

    __tablename__ = "scrapbook_files"

    id = Column(Integer, primary_key=True)
    year = Column(Integer, nullable=False, unique=True)
    filename = Column(String, nullable=False)
    local_path = Column(String, nullable=False)
    s3_url = Column(String, nullable=True)
    s3_key = Column(String, nullable=True)
    status = Column(String, nullable=False, default="generated")
    file_size = Column(Integer, nullable=True)
    generated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<ScrapbookFile(year={self.year}, filename={self.filename}, status={self.status})>"
