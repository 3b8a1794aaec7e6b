"""Stage 4: HTML rendering — turn the ScrapbookPlan into one static flipbook page.

Each Page becomes an HTML fragment via the Jinja2 template
``templates/page.html.j2``. The fragments are spliced into the document
shell at its single ``<!-- scrapbook:pages -->`` marker, which sits inside
the ``<div class="flipbook">`` container the client-side viewer paginates.

Reads:  templates/scrapbook-template.html  (or settings.template_path)

The image URLs emitted here are the web application's endpoints and must
stay byte-identical:
  /api/v1/menu-images/<event id>
  /api/photos/<filename>/preview
  /api/blog-images/<filename>/preview
"""
import logging
import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from errors import TemplateMalformed
from models.page_plan import Page, ScrapbookPlan
from settings import Settings

logger = logging.getLogger(__name__)

# Path (relative to the package root) where Jinja2 looks for templates
_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
DEFAULT_SHELL_PATH = _TEMPLATE_DIR / "scrapbook-template.html"

PAGES_MARKER = "<!-- scrapbook:pages -->"
_TITLE_PATTERN = re.compile(r"<title>.*?</title>", re.IGNORECASE | re.DOTALL)
_DOCTYPE = "<!DOCTYPE html>"

# This one cover title is laid out over two lines on the embossed cover
_TWO_LINE_TITLE = "Maguire Family Thanksgiving"
_TWO_LINE_SPLIT = ("Maguire Family", "Thanksgiving")

_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "j2"]),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=False,
)


def run(settings: Settings, plan: ScrapbookPlan) -> str:
    """Render ``plan`` into a complete HTML document and return it."""
    shell_path = settings.template_path or DEFAULT_SHELL_PATH
    template = load_template(shell_path)
    html = render_document(plan.pages, template, plan.title, year=plan.year)
    logger.info("Stage 4 complete → %d pages, %d characters", len(plan.pages), len(html))
    return html


def load_template(path: Path) -> str:
    """Read the document shell; a missing or unreadable file is TemplateMalformed."""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TemplateMalformed(f"Cannot read template {path}: {exc}") from exc


def render_page(page: Page) -> str:
    """Render a single page fragment. Pure: no lookups, no I/O beyond the cached template."""
    return _env.get_template("page.html.j2").render(
        page=page,
        cover_lines=_cover_lines(page.title or ""),
        break_tag=Markup("<br>"),
    )


def render_document(
    pages: list[Page],
    template: str,
    title: str,
    year: int | None = None,
) -> str:
    """Splice the rendered pages into ``template`` at its pages marker.

    Raises TemplateMalformed unless the marker occurs exactly once.
    """
    marker_count = template.count(PAGES_MARKER)
    if marker_count != 1:
        raise TemplateMalformed(
            f"Template must contain exactly one {PAGES_MARKER} marker, found {marker_count}"
        )

    html, title_count = _TITLE_PATTERN.subn(
        lambda _: f"<title>{Markup.escape(title)}</title>", template, count=1
    )
    if title_count == 0:
        logger.warning("Template has no <title> element; scrapbook title not applied")

    if year is not None and html.startswith(_DOCTYPE):
        html = _DOCTYPE + "\n" + _generation_comment(year, len(pages)) + html[len(_DOCTYPE):]

    fragments = "\n".join(render_page(page) for page in pages)
    before, after = html.split(PAGES_MARKER)
    return before + fragments + after


def _cover_lines(title: str) -> list[str]:
    if title == _TWO_LINE_TITLE:
        return list(_TWO_LINE_SPLIT)
    return [title]


def _generation_comment(year: int, page_count: int) -> str:
    # No timestamp: regenerating unchanged content must give identical bytes
    return (
        "<!--\n"
        "SCRAPBOOK GENERATION METADATA:\n"
        f"- Year: {year}\n"
        f"- Pages: {page_count}\n"
        "-->"
    )
