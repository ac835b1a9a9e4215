"""
Presentation Helpers.

Display-time formatting for note cards and editors: title fallback,
markup stripping for previews and character counts, relative dates,
and tag list editing.
"""

from datetime import datetime
from html.parser import HTMLParser

from notekeeper.backend.core.exceptions import ValidationError
from notekeeper.backend.core.utils import utc_now

UNTITLED = "Untitled Note"
PREVIEW_LENGTH = 150
VISIBLE_TAGS = 3


class _TextExtractor(HTMLParser):
    """Collects the text nodes of an HTML fragment."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []

    def handle_data(self, data: str) -> None:
        self.parts.append(data)


def display_title(title: str) -> str:
    return title.strip() or UNTITLED


def strip_markup(content: str) -> str:
    """Return the text of formatted content with all tags removed."""
    parser = _TextExtractor()
    parser.feed(content)
    parser.close()
    return "".join(parser.parts)


def preview_text(content: str, max_length: int = PREVIEW_LENGTH) -> str:
    text = strip_markup(content)
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


def character_count(content: str) -> int:
    return len(strip_markup(content))


def relative_date(moment: datetime, now: datetime | None = None) -> str:
    """
    Human label for a timestamp: "Today", "Yesterday", "3 days ago",
    or the ISO date once it is more than a week old. Future
    timestamps count as "Today".
    """
    now = now or utc_now()
    days = max((now - moment).days, 0)
    if days == 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    return moment.date().isoformat()


def tag_summary(tags: list[str], visible: int = VISIBLE_TAGS) -> str:
    """First few tags, then "+N more"."""
    shown = ", ".join(tags[:visible])
    hidden = len(tags) - visible
    if hidden > 0:
        return f"{shown} +{hidden} more"
    return shown


def add_tag(tags: list[str], tag: str) -> list[str]:
    """
    Return ``tags`` with ``tag`` appended.

    Raises:
        ValidationError: If the tag is blank or already present
            (exact, case-sensitive match)
    """
    cleaned = tag.strip()
    if not cleaned:
        raise ValidationError("Tag must not be empty", details={"tag": tag})
    if cleaned in tags:
        raise ValidationError("Tag already added", details={"tag": cleaned})
    return [*tags, cleaned]


def remove_tag(tags: list[str], tag: str) -> list[str]:
    return [existing for existing in tags if existing != tag]


def dedupe_tags(tags: list[str]) -> list[str]:
    """Trim tags, drop blanks and later duplicates, keep order."""
    result: list[str] = []
    for tag in tags:
        cleaned = tag.strip()
        if cleaned and cleaned not in result:
            result.append(cleaned)
    return result
