"""Stage 3: Page assembly — arrange a year's content items into flipbook pages.

Page order:
  1. front cover (always)
  2. one page per title / text-paragraph / heading / menu / page-photo item,
     in item order
     - photo items are batched; a grid page is emitted as soon as a batch
       reaches ``settings.photos_per_grid`` (6), at the position of the photo
       that filled it
     - blog items are collected and never emitted during the walk
  3. the trailing partial photo grid, if any
  4. a single journal page holding every blog image in item order, if any
     blog items exist
  5. back cover (always)

Every reference is resolved while walking; the first failure aborts the
assembly and propagates.

Writes: data/.cache/page_plan_<year>.json  (ScrapbookPlan, debug artifact, via
        write_plan_artifact once the scrapbook has been published)
"""
import json
import logging
from pathlib import Path

from models.content_items import ContentItem
from models.page_plan import ImageSlot, Page, ScrapbookPlan
from pipeline.stage2_resolve import ReferenceResolver
from settings import Settings

logger = logging.getLogger(__name__)

_PHOTO_CAPTION = "Thanksgiving Memory"
_PHOTO_GRID_TITLE = "Thanksgiving Memories"
_JOURNAL_CAPTION = "Journal Entry"


def run(
    settings: Settings,
    year: int,
    items: list[ContentItem],
    resolver: ReferenceResolver,
) -> ScrapbookPlan:
    """Build the ScrapbookPlan for ``year``.

    ``items`` must already be in display order (see stage 1). Nothing is
    written here; see ``write_plan_artifact``.
    """
    pages = assemble_pages(settings, year, items, resolver)
    plan = ScrapbookPlan(year=year, title=scrapbook_title(year), pages=pages)

    logger.info("Stage 3 complete → %s", plan.title)
    logger.info("  Total pages: %d", len(pages))
    _log_page_summary(pages)
    return plan


def scrapbook_title(year: int) -> str:
    return f"Thanksgiving {year} Scrapbook"


def write_plan_artifact(settings: Settings, plan: ScrapbookPlan) -> Path | None:
    """Dump ``plan`` to page_plan_<year>.json; return the path, or None on failure.

    The artifact is for debugging only, so an OSError is logged and ignored.
    """
    artifact_path = settings.cache_dir / f"page_plan_{plan.year}.json"
    try:
        settings.cache_dir.mkdir(parents=True, exist_ok=True)
        artifact_path.write_text(plan.model_dump_json(indent=2), encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write %s: %s (debug artifact skipped)", artifact_path, exc)
        return None
    logger.debug("Wrote %s", artifact_path)
    return artifact_path


def assemble_pages(
    settings: Settings,
    year: int,
    items: list[ContentItem],
    resolver: ReferenceResolver,
) -> list[Page]:
    pages: list[Page] = [
        Page(id="front-cover", page_type="front-cover",
             title=settings.front_cover_title, year=year),
    ]
    pending_photos: list[tuple[ContentItem, str]] = []
    pending_blog_images: list[tuple[ContentItem, list[str]]] = []

    for item in items:
        if item.content_type == "photo":
            pending_photos.append((item, resolver.resolve_photo(item.reference)))
            if len(pending_photos) == settings.photos_per_grid:
                pages.append(_make_photo_grid(pending_photos))
                pending_photos = []
        elif item.content_type == "blog":
            pending_blog_images.append((item, resolver.resolve_blog_images(item.reference)))
        else:
            pages.append(_make_single_page(item, year, resolver))

    if pending_photos:
        pages.append(_make_photo_grid(pending_photos))

    if pending_blog_images:
        pages.append(_make_journal_page(pending_blog_images))

    pages.append(
        Page(id="back-cover", page_type="back-cover",
             title=settings.back_cover_title, year=year)
    )
    return pages


# ---------------------------------------------------------------------------
# Single-item pages
# ---------------------------------------------------------------------------

def _make_single_page(item: ContentItem, year: int, resolver: ReferenceResolver) -> Page:
    breaks = {
        "page_break_before": item.page_break_before,
        "page_break_after": item.page_break_after,
    }
    if item.content_type == "title":
        title, description = _parse_title(item.content_reference)
        return Page(id=f"title-{item.id}", page_type="title-page",
                    title=title, description=description, **breaks)

    if item.content_type == "text-paragraph":
        return Page(id=f"text-{item.id}", page_type="text-page",
                    text=item.content_reference, **breaks)

    if item.content_type == "heading":
        return Page(id=f"heading-{item.id}", page_type="heading-page",
                    text=item.content_reference, **breaks)

    if item.content_type == "menu":
        return Page(id=f"menu-{item.id}", page_type="menu-page",
                    title=f"Thanksgiving Menu {year}",
                    menu_id=resolver.resolve_menu(item.reference), **breaks)

    # page-photo
    filename = resolver.resolve_photo(item.reference)
    return Page(id=f"page-photo-{item.id}", page_type="page-photo-page",
                images=[ImageSlot(image_url=filename, caption=_PHOTO_CAPTION)], **breaks)


def _parse_title(reference: str) -> tuple[str, str | None]:
    """Split a title reference into (title, description).

    The journal converter stores ``{"title": ..., "description": ...}`` as
    JSON; older rows carry the plain title text.
    """
    try:
        data = json.loads(reference)
    except ValueError:
        return reference, None
    if not isinstance(data, dict):
        return reference, None
    title = str(data.get("title") or "")
    description = data.get("description")
    if not isinstance(description, str) or not description.strip():
        description = None
    return title, description


# ---------------------------------------------------------------------------
# Grouped pages
# ---------------------------------------------------------------------------

def _make_photo_grid(batch: list[tuple[ContentItem, str]]) -> Page:
    first, _ = batch[0]
    return Page(
        id=f"photo-grid-{first.id}",
        page_type="photo-page",
        title=_PHOTO_GRID_TITLE,
        images=[ImageSlot(image_url=filename, caption=_PHOTO_CAPTION) for _, filename in batch],
    )


def _make_journal_page(blog_items: list[tuple[ContentItem, list[str]]]) -> Page:
    first, _ = blog_items[0]
    return Page(
        id=f"journal-{first.id}",
        page_type="journal-page",
        images=[
            ImageSlot(image_url=filename, caption=_JOURNAL_CAPTION)
            for _, filenames in blog_items
            for filename in filenames
        ],
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _log_page_summary(pages: list[Page]) -> None:
    counts: dict[str, int] = {}
    for p in pages:
        counts[p.page_type] = counts.get(p.page_type, 0) + 1
    for page_type, count in sorted(counts.items()):
        logger.info("  %-18s %d", page_type, count)
