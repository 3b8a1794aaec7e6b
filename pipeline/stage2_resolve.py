"""Stage 2: Reference resolution — turn structured references into display data.

One lookup per reference, no batching. Every failure raises so that the
run aborts before anything is written:
  - wrong reference kind for the operation → InvalidReference
  - missing row, or a photo row without a filename → NotFound
"""
import logging

from sqlalchemy.orm import Session

from errors import InvalidReference, NotFound
from models.content_items import ContentReference, parse_reference
from models.records import BlogPost, Event, Photo

logger = logging.getLogger(__name__)

_BLOG_IMAGE_PREFIX = "/api/blog-images/"
_BLOG_IMAGE_SUFFIX = "/preview"


class ReferenceResolver:
    """Resolves menu, photo and blog references against the content store."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def resolve_menu(self, reference: ContentReference | str) -> int:
        """Return the event id behind a ``menu_<id>`` reference."""
        ref = _coerce(reference, {"menu"})
        event = self._session.get(Event, ref.id)
        logger.debug("Menu lookup %s → %s", ref, event.event_id if event else None)
        if event is None:
            raise NotFound(str(ref), f"event {ref.id} does not exist")
        return event.event_id

    def resolve_photo(self, reference: ContentReference | str) -> str:
        """Return the stored filename behind a ``photo_<id>`` / ``page_photo_<id>`` reference."""
        ref = _coerce(reference, {"photo", "page_photo"})
        photo = self._session.get(Photo, ref.id)
        logger.debug("Photo lookup %s → %s", ref, photo.filename if photo else None)
        if photo is None:
            raise NotFound(str(ref), f"photo {ref.id} does not exist")
        if not photo.filename:
            raise NotFound(str(ref), f"photo {ref.id} has no filename")
        return photo.filename

    def resolve_blog_images(self, reference: ContentReference | str) -> list[str]:
        """Return the featured image followed by the post's images, as bare filenames."""
        ref = _coerce(reference, {"blog"})
        post = self._session.get(BlogPost, ref.id)
        if post is None:
            raise NotFound(str(ref), f"blog post {ref.id} does not exist")

        filenames: list[str] = []
        if post.featured_image:
            filenames.append(_strip_blog_image_url(post.featured_image))
        images = post.images if isinstance(post.images, list) else []
        for image in images:
            if isinstance(image, str) and image.strip():
                filenames.append(_strip_blog_image_url(image))

        logger.debug("Blog lookup %s → %d image(s)", ref, len(filenames))
        return filenames


def _coerce(reference: ContentReference | str, kinds: set[str]) -> ContentReference:
    ref = parse_reference(reference) if isinstance(reference, str) else reference
    if ref.kind not in kinds:
        expected = " or ".join(sorted(kinds))
        raise InvalidReference(str(ref), f"expected a {expected} reference")
    return ref


def _strip_blog_image_url(url: str) -> str:
    """``/api/blog-images/abc.jpg/preview`` → ``abc.jpg``; bare names pass through."""
    name = url.strip()
    if name.startswith(_BLOG_IMAGE_PREFIX):
        name = name[len(_BLOG_IMAGE_PREFIX):]
    if name.endswith(_BLOG_IMAGE_SUFFIX):
        name = name[: -len(_BLOG_IMAGE_SUFFIX)]
    return name
