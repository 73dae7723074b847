"""Tests for comment section parsing and serialization."""

from jot.core.types import Comment
from jot.vault.comments import parse_comments, serialize_comments, split_sections

TS = 1705314600000  # 2024-01-15 10:30 UTC


class TestParseComments:
    """Tests for parse_comments()."""

    def test_dated_comments(self):
        """Each level-3 heading starts a comment timestamped by its heading."""
        body = (
            "## Notes\n\n"
            "### 2024-01-15 10:30\nFirst\n\n"
            "### 2024-01-16 08:05\nSecond line\nmore\n"
        )

        comments = parse_comments(body)

        assert [c.body for c in comments] == ["First", "Second line\nmore"]
        assert comments[0].created_at == TS
        assert comments[0].id == str(TS)
        assert comments[1].created_at == TS + (21 * 60 + 35) * 60_000

    def test_text_before_first_heading_ignored(self):
        """Preamble and the ## Notes title are not comments."""
        body = "Some intro\n## Notes\n\n### 2024-01-15 10:30\nOnly one\n"

        assert [c.body for c in parse_comments(body)] == ["Only one"]

    def test_deeper_headings_belong_to_the_comment(self):
        """#### lines are part of the body, not new comments."""
        body = "### 2024-01-15 10:30\nIntro\n#### Detail\nMore\n"

        comments = parse_comments(body)

        assert len(comments) == 1
        assert comments[0].body == "Intro\n#### Detail\nMore"

    def test_heading_requires_whitespace(self):
        """###text without a space is not a heading."""
        assert parse_comments("###2024-01-15 10:30\nnot a comment\n") == []

    def test_empty_sections_skipped(self):
        """A heading with only whitespace below it yields nothing."""
        body = "### 2024-01-15 10:30\n\n   \n### 2024-01-15 10:31\ntext\n"

        comments = parse_comments(body)

        assert len(comments) == 1
        assert comments[0].created_at == TS + 60_000

    def test_undated_comments_use_mtime_fallback(self):
        """Undated headings count back from the file mtime, one second apart."""
        body = "### Thoughts\nA\n### 2024-01-15 10:30\nB\n### More thoughts\nC\n"

        comments = parse_comments(body, file_mtime_ms=2_000_000)

        assert [c.created_at for c in comments] == [2_000_000, TS, 1_999_000]

    def test_undated_without_mtime_uses_now(self):
        """With no mtime the fallback base is the current time."""
        comments = parse_comments("### Thoughts\nA\n")

        assert comments[0].created_at > TS

    def test_same_minute_comments_get_distinct_ids(self):
        """Two comments written in the same minute don't share an id."""
        body = "### 2024-01-15 10:30\nA\n### 2024-01-15 10:30\nB\n"

        comments = parse_comments(body)

        assert [c.created_at for c in comments] == [TS, TS - 1]
        assert len({c.id for c in comments}) == 2

    def test_no_headings(self):
        """A body with no headings has no comments."""
        assert parse_comments("just some text\n") == []


class TestSerializeComments:
    """Tests for serialize_comments()."""

    def test_no_comments_is_empty(self):
        """An empty thread serializes to nothing."""
        assert serialize_comments([]) == ""

    def test_layout(self):
        """Notes title, blank line, then heading/body/blank per comment."""
        comments = [
            Comment(id=str(TS), body="Hi", created_at=TS),
            Comment(id=str(TS + 60_000), body="Two\nlines", created_at=TS + 60_000),
        ]

        assert serialize_comments(comments) == (
            "## Notes\n\n"
            "### 2024-01-15 10:30\nHi\n\n"
            "### 2024-01-15 10:31\nTwo\nlines\n"
        )

    def test_serialize_then_parse(self):
        """Bodies survive; timestamps come back at minute precision."""
        comments = [
            Comment(id="1", body="First", created_at=TS + 12_345),
            Comment(id="2", body="Second", created_at=TS + 120_000),
        ]

        parsed = parse_comments(serialize_comments(comments))

        assert [c.body for c in parsed] == ["First", "Second"]
        assert [c.created_at for c in parsed] == [TS, TS + 120_000]


class TestSplitSections:
    """Tests for split_sections()."""

    def test_headings_and_text(self):
        """Sections pair heading text with the lines below it."""
        sections = split_sections("x\n### one  \na\nb\n### two\n")

        assert sections == [("one", "a\nb"), ("two", "")]
