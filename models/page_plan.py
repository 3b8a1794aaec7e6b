from typing import Literal

from pydantic import BaseModel, Field

PageType = Literal[
    "front-cover",
    "title-page",
    "text-page",
    "heading-page",
    "menu-page",
    "photo-page",
    "page-photo-page",
    "journal-page",
    "back-cover",
]


class ImageSlot(BaseModel):
    image_url: str  # bare filename; the renderer builds the endpoint URL
    caption: str


class Page(BaseModel):
    """One unit of the flipbook.

    Only the fields relevant to ``page_type`` are populated:
      covers           title, year
      title-page       title, description
      text/heading     text
      menu-page        title, menu_id
      photo-page       title, images
      page-photo-page  images (exactly one)
      journal-page     images
    """

    id: str
    page_type: PageType
    title: str | None = None
    description: str | None = None
    text: str | None = None
    year: int | None = None
    menu_id: int | None = None
    images: list[ImageSlot] = Field(default_factory=list)
    page_break_before: bool = False
    page_break_after: bool = False


class ScrapbookPlan(BaseModel):
    year: int
    title: str
    pages: list[Page] = Field(default_factory=list)
