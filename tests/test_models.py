"""Validation tests for the content item, reference and page models."""
import pytest
from pydantic import ValidationError

from errors import InvalidReference
from models.content_items import ContentItem, ContentReference, parse_reference
from models.page_plan import ImageSlot, Page, ScrapbookPlan


def _item(content_type="photo", reference="photo_1", **kwargs) -> ContentItem:
    defaults = dict(id=1, year=2020, display_order=1)
    defaults.update(kwargs)
    return ContentItem.from_fields(
        content_type=content_type, content_reference=reference, **defaults
    )


# ---------------------------------------------------------------------------
# parse_reference
# ---------------------------------------------------------------------------

class TestParseReference:
    @pytest.mark.parametrize("text, kind, ref_id", [
        ("menu_15", "menu", 15),
        ("photo_45", "photo", 45),
        ("page_photo_57", "page_photo", 57),
        ("blog_4", "blog", 4),
    ])
    def test_known_kinds(self, text, kind, ref_id):
        assert parse_reference(text) == ContentReference(kind=kind, id=ref_id)

    def test_page_photo_not_mistaken_for_photo(self):
        ref = parse_reference("page_photo_57")
        assert ref.kind == "page_photo"
        assert ref.id == 57

    def test_unknown_prefix(self):
        with pytest.raises(InvalidReference) as exc_info:
            parse_reference("recipe_3")
        assert exc_info.value.reference == "recipe_3"

    def test_non_numeric_id(self):
        with pytest.raises(InvalidReference):
            parse_reference("photo_abc")

    def test_trailing_garbage_rejected(self):
        with pytest.raises(InvalidReference):
            parse_reference("menu_15x")

    @pytest.mark.parametrize("text", ["blog_", "photo_", "page_photo_"])
    def test_missing_id(self, text):
        with pytest.raises(InvalidReference) as exc_info:
            parse_reference(text)
        assert exc_info.value.reason == "missing id"

    def test_str_round_trips_to_reference_text(self):
        assert str(parse_reference("page_photo_57")) == "page_photo_57"

    def test_reference_is_frozen(self):
        ref = parse_reference("menu_1")
        with pytest.raises(ValidationError):
            ref.id = 2


# ---------------------------------------------------------------------------
# ContentItem.from_fields
# ---------------------------------------------------------------------------

class TestContentItem:
    def test_typed_item_gets_parsed_reference(self):
        item = _item("menu", "menu_7")
        assert item.reference == ContentReference(kind="menu", id=7)

    def test_literal_items_have_no_reference(self):
        for content_type in ("title", "text-paragraph", "heading"):
            item = _item(content_type, "photo_1 is just text here")
            assert item.reference is None
            assert item.content_reference == "photo_1 is just text here"

    def test_photo_item_accepts_page_photo_reference(self):
        assert _item("photo", "page_photo_3").reference.kind == "page_photo"

    def test_page_photo_item_accepts_photo_reference(self):
        assert _item("page-photo", "photo_3").reference.kind == "photo"

    def test_kind_mismatch_rejected(self):
        with pytest.raises(InvalidReference):
            _item("menu", "photo_3")

    def test_unknown_content_type_rejected(self):
        with pytest.raises(InvalidReference):
            _item("video", "video_1")

    def test_page_break_flags_preserved(self):
        item = _item(page_break_before=True, page_break_after=True)
        assert item.page_break_before is True
        assert item.page_break_after is True


# ---------------------------------------------------------------------------
# Page / ScrapbookPlan
# ---------------------------------------------------------------------------

class TestPage:
    def test_unknown_page_type_rejected(self):
        with pytest.raises(ValidationError):
            Page(id="x", page_type="poster-page")

    def test_plan_json_round_trip(self):
        plan = ScrapbookPlan(year=2020, title="Thanksgiving 2020 Scrapbook", pages=[
            Page(id="front-cover", page_type="front-cover", title="Cover", year=2020),
            Page(id="photo-grid-1", page_type="photo-page",
                 images=[ImageSlot(image_url="a.jpg", caption="Thanksgiving Memory")]),
        ])
        loaded = ScrapbookPlan.model_validate_json(plan.model_dump_json())
        assert loaded == plan
