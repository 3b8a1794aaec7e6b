"""Stage 1: Load — read a year's scrapbook content items from the content store.

Items come back in ascending ``display_order``; equal orders fall back to
ascending item id so every run sees the same sequence. Each typed
``content_reference`` is parsed into a ContentReference here, once, so later
stages never re-parse strings.

Reads:  scrapbook_content (ScrapbookContent rows for the year)
"""
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from errors import InvalidYear, NoContent
from models.content_items import ContentItem
from models.records import ScrapbookContent

logger = logging.getLogger(__name__)

_MIN_YEAR = 1900
_MAX_YEAR = 2100


def run(session: Session, year: int) -> list[ContentItem]:
    """Return the year's ContentItems in page order.

    Raises InvalidYear, NoContent, or InvalidReference (malformed reference).
    """
    _validate_year(year)

    rows = session.scalars(
        select(ScrapbookContent)
        .where(ScrapbookContent.year == year)
        .order_by(ScrapbookContent.display_order, ScrapbookContent.id)
    ).all()

    if not rows:
        raise NoContent(year)

    items = [_to_item(row) for row in rows]

    logger.info("Stage 1 complete → %d content items for %d", len(items), year)
    _log_type_summary(items)
    return items


def _validate_year(year: object) -> None:
    # bool is an int subclass; True is not a year
    if not isinstance(year, int) or isinstance(year, bool):
        raise InvalidYear(year)
    if not _MIN_YEAR <= year <= _MAX_YEAR:
        raise InvalidYear(year)


def _to_item(row: ScrapbookContent) -> ContentItem:
    return ContentItem.from_fields(
        id=row.id,
        year=row.year,
        content_type=row.content_type,
        content_reference=row.content_reference,
        display_order=row.display_order,
        page_break_before=bool(row.page_break_before),
        page_break_after=bool(row.page_break_after),
    )


def _log_type_summary(items: list[ContentItem]) -> None:
    counts: dict[str, int] = {}
    for item in items:
        counts[item.content_type] = counts.get(item.content_type, 0) + 1
    for content_type, count in sorted(counts.items()):
        logger.info("  %-16s %d", content_type, count)
