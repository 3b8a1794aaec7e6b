"""Exception hierarchy for scrapbook generation.

Every failure that aborts a run derives from ``ScrapbookError`` so the CLI
and admin tooling can report the kind and the offending year or reference.
``PublishWarning`` never leaves the publisher; it is logged and swallowed.
"""
from pathlib import Path


class ScrapbookError(Exception):
    """Base class for every scrapbook generation failure."""

    kind = "ScrapbookError"


class InvalidYear(ScrapbookError):
    kind = "InvalidYear"

    def __init__(self, year: object) -> None:
        self.year = year
        super().__init__(f"Invalid year {year!r}: must be an integer between 1900 and 2100")


class NoContent(ScrapbookError):
    kind = "NoContent"

    def __init__(self, year: int) -> None:
        self.year = year
        super().__init__(f"No scrapbook content found for year {year}")


class InvalidReference(ScrapbookError):
    kind = "InvalidReference"

    def __init__(self, reference: str, reason: str) -> None:
        self.reference = reference
        self.reason = reason
        super().__init__(f"Invalid content reference {reference!r}: {reason}")


class NotFound(ScrapbookError):
    kind = "NotFound"

    def __init__(self, reference: str, detail: str) -> None:
        self.reference = reference
        self.detail = detail
        super().__init__(f"{reference}: {detail}")


class TemplateMalformed(ScrapbookError):
    kind = "TemplateMalformed"


class WriteFailed(ScrapbookError):
    kind = "WriteFailed"

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Could not write {path}: {reason}")


class PublishWarning(ScrapbookError):
    kind = "PublishWarning"

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"S3 mirror of {key} failed: {reason}")
