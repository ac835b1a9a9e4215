"""Unit tests for presentation helpers."""

from datetime import datetime, timedelta

import pytest

from notekeeper.backend.core.exceptions import ValidationError
from notekeeper.backend.services import presentation

NOW = datetime(2026, 3, 10, 12, 0, 0)


class TestTitles:
    """Tests for display titles."""

    def test_blank_title_falls_back(self) -> None:
        assert presentation.display_title("") == "Untitled Note"
        assert presentation.display_title("  ") == "Untitled Note"

    def test_title_trimmed(self) -> None:
        assert presentation.display_title(" Groceries ") == "Groceries"


class TestMarkup:
    """Tests for markup stripping, previews and counts."""

    def test_strip_markup(self) -> None:
        """Should drop tags and decode entities."""
        assert presentation.strip_markup("<p>milk &amp; <b>bread</b></p>") == "milk & bread"

    def test_plain_text_unchanged(self) -> None:
        assert presentation.strip_markup("just text") == "just text"

    def test_preview_truncates(self) -> None:
        """Should cut long text and add an ellipsis."""
        preview = presentation.preview_text("<p>" + "x" * 200 + "</p>")
        assert preview == "x" * 150 + "..."

    def test_preview_short_text(self) -> None:
        assert presentation.preview_text("<p>milk</p>") == "milk"

    def test_character_count_ignores_tags(self) -> None:
        assert presentation.character_count("<p>milk</p>") == 4


class TestRelativeDate:
    """Tests for relative date labels."""

    @pytest.mark.parametrize(
        ("delta", "label"),
        [
            (timedelta(hours=3), "Today"),
            (timedelta(days=1, hours=2), "Yesterday"),
            (timedelta(days=4), "4 days ago"),
        ],
    )
    def test_recent(self, delta, label) -> None:
        assert presentation.relative_date(NOW - delta, now=NOW) == label

    def test_future_is_today(self) -> None:
        """Should not count a slightly future timestamp as yesterday."""
        assert presentation.relative_date(NOW + timedelta(hours=3), now=NOW) == "Today"
        assert presentation.relative_date(NOW + timedelta(days=2), now=NOW) == "Today"

    def test_older_than_a_week(self) -> None:
        """Should show the date itself."""
        assert presentation.relative_date(NOW - timedelta(days=30), now=NOW) == "2026-02-08"


class TestTags:
    """Tests for tag editing."""

    def test_summary_truncates(self) -> None:
        tags = ["a", "b", "c", "d", "e"]
        assert presentation.tag_summary(tags) == "a, b, c +2 more"

    def test_summary_short(self) -> None:
        assert presentation.tag_summary(["home"]) == "home"
        assert presentation.tag_summary([]) == ""

    def test_add_tag_trims(self) -> None:
        assert presentation.add_tag(["home"], "  work ") == ["home", "work"]

    def test_add_duplicate_rejected(self) -> None:
        with pytest.raises(ValidationError, match="already"):
            presentation.add_tag(["home"], "home")

    def test_add_case_differs_allowed(self) -> None:
        assert presentation.add_tag(["home"], "Home") == ["home", "Home"]

    def test_add_blank_rejected(self) -> None:
        with pytest.raises(ValidationError):
            presentation.add_tag([], "   ")

    def test_remove_tag(self) -> None:
        assert presentation.remove_tag(["home", "work"], "home") == ["work"]
        assert presentation.remove_tag(["home"], "absent") == ["home"]

    def test_dedupe_tags(self) -> None:
        assert presentation.dedupe_tags([" home", "work", "home", "", "  "]) == ["home", "work"]
