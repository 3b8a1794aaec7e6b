import re
from typing import Literal

from pydantic import BaseModel, ConfigDict

from errors import InvalidReference

ContentType = Literal[
    "title", "text-paragraph", "heading", "menu", "photo", "page-photo", "blog",
]
ReferenceKind = Literal["menu", "photo", "page_photo", "blog"]

# page_photo must be tried before photo: "page_photo_57" also ends in "photo_57"
_REFERENCE_PATTERN = re.compile(r"^(page_photo|photo|menu|blog)_(.*)$")

# Content types whose content_reference carries a "<kind>_<id>" pointer,
# mapped to the reference kinds each one accepts.
_ALLOWED_KINDS: dict[str, frozenset[str]] = {
    "menu": frozenset({"menu"}),
    "photo": frozenset({"photo", "page_photo"}),
    "page-photo": frozenset({"photo", "page_photo"}),
    "blog": frozenset({"blog"}),
}

# Content types whose content_reference is literal display text
LITERAL_TYPES = frozenset({"title", "text-paragraph", "heading"})


class ContentReference(BaseModel):
    """Structured form of a ``<kind>_<id>`` pointer such as ``photo_45``."""

    model_config = ConfigDict(frozen=True)

    kind: ReferenceKind
    id: int

    def __str__(self) -> str:
        return f"{self.kind}_{self.id}"


def parse_reference(text: str) -> ContentReference:
    """Parse ``menu_15`` / ``photo_45`` / ``page_photo_57`` / ``blog_4``.

    Raises InvalidReference for an unknown prefix or a missing or non-numeric id.
    """
    match = _REFERENCE_PATTERN.match(text.strip())
    if match is None:
        raise InvalidReference(text, "unrecognised reference prefix")
    kind, raw_id = match.groups()
    if not raw_id:
        raise InvalidReference(text, "missing id")
    if not (raw_id.isascii() and raw_id.isdigit()):
        raise InvalidReference(text, f"non-numeric id {raw_id!r}")
    return ContentReference(kind=kind, id=int(raw_id))


class ContentItem(BaseModel):
    """One ordering record of a year's scrapbook.

    ``reference`` is parsed once from ``content_reference`` when the item is
    built via ``from_fields``; literal-text types keep it as None.
    The page-break flags are carried through but do not affect layout.
    """

    id: int
    year: int
    content_type: ContentType
    content_reference: str
    display_order: int
    page_break_before: bool = False
    page_break_after: bool = False
    reference: ContentReference | None = None

    @classmethod
    def from_fields(
        cls,
        *,
        id: int,
        year: int,
        content_type: str,
        content_reference: str,
        display_order: int,
        page_break_before: bool = False,
        page_break_after: bool = False,
    ) -> "ContentItem":
        """Build an item, validating the content type and parsing its reference."""
        if content_type not in LITERAL_TYPES and content_type not in _ALLOWED_KINDS:
            raise InvalidReference(content_reference, f"unknown content type {content_type!r}")

        reference = None
        if content_type in _ALLOWED_KINDS:
            reference = parse_reference(content_reference)
            if reference.kind not in _ALLOWED_KINDS[content_type]:
                raise InvalidReference(
                    content_reference,
                    f"a {reference.kind} reference cannot back a {content_type} item",
                )

        return cls(
            id=id,
            year=year,
            content_type=content_type,
            content_reference=content_reference,
            display_order=display_order,
            page_break_before=page_break_before,
            page_break_after=page_break_after,
            reference=reference,
        )
