from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from models.records import Base, BlogPost, Event, Photo, ScrapbookContent
from settings import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a fresh temp project dir. S3 mirroring is off by default."""
    return Settings(project_dir=tmp_path, database_url="sqlite://")


@pytest.fixture
def session():
    """In-memory SQLite content store with all tables created."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()


class ContentSeeder:
    """Small helper for filling the content store in tests."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self._order = 0

    def event(self, event_id: int, name: str = "Thanksgiving") -> None:
        self.session.add(Event(event_id=event_id, event_name=name))
        self.session.commit()

    def photo(self, photo_id: int, filename: str | None = None) -> None:
        if filename is None:
            filename = f"photo-{photo_id}.jpg"
        self.session.add(Photo(photo_id=photo_id, filename=filename))
        self.session.commit()

    def blog(self, blog_id: int, featured_image=None, images=None) -> None:
        self.session.add(BlogPost(
            blog_post_id=blog_id,
            title=f"Post {blog_id}",
            featured_image=featured_image,
            images=images,
        ))
        self.session.commit()

    def item(self, year: int, content_type: str, reference: str, display_order=None,
             page_break_before=False) -> None:
        if display_order is None:
            self._order += 1
            display_order = self._order
        self.session.add(ScrapbookContent(
            year=year,
            content_type=content_type,
            content_reference=reference,
            display_order=display_order,
            page_break_before=page_break_before,
            page_break_after=False,
        ))
        self.session.commit()


@pytest.fixture
def seed(session) -> ContentSeeder:
    return ContentSeeder(session)
