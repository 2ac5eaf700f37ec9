"""Tests for raw git output parsing."""

from gitviz.core.parser import (
    Branch,
    CommitRecord,
    FileDelta,
    parse_author_identities,
    parse_basic,
    parse_branches,
    parse_extended,
)

from tests.helpers import SEP, basic_line, header_line


class TestParseBasic:
    """Test parse_basic."""

    def test_parses_fields_in_order(self, basic_log):
        commits = parse_basic(basic_log)

        assert [c.id for c in commits] == ["c" * 40, "b" * 40, "a" * 40]
        first = commits[0]
        assert first.short_id == "c" * 7
        assert first.author_name == "A"
        assert first.author_email == "a@example.com"
        assert first.date == "2025-01-02"
        assert first.parents == ("b" * 40,)

    def test_root_commit_has_no_parents(self, basic_log):
        assert parse_basic(basic_log)[-1].parents == ()

    def test_merge_parents_are_split(self):
        line = basic_line("m" * 40, "A", "a@example.com", "2025-02-01", "p1 p2")
        commit = parse_basic(line)[0]

        assert commit.parents == ("p1", "p2")

    def test_short_lines_are_skipped(self):
        raw = "\n".join(
            [
                basic_line("a" * 40, "A", "a@example.com", "2025-01-01"),
                SEP.join(["broken", "line"]),
                "",
            ]
        )
        commits = parse_basic(raw)

        assert len(commits) == 1
        assert commits[0].id == "a" * 40

    def test_empty_text(self):
        assert parse_basic("") == []

    def test_free_text_may_contain_pipes_and_spaces(self):
        line = basic_line("a" * 40, "Ann | Lee", "ann@example.com", "2025-01-01")
        assert parse_basic(line)[0].author_name == "Ann | Lee"


class TestParseExtended:
    """Test parse_extended."""

    def test_groups_deltas_under_headers(self, numstat_log):
        commits = parse_extended(numstat_log)

        assert len(commits) == 3
        assert commits[0].files == (
            FileDelta("src/a.js", 5, 1),
            FileDelta("assets/logo.png", 0, 0),
        )
        assert commits[2].files == (
            FileDelta("src/a.js", 10, 0),
            FileDelta("README.md", 3, 0),
        )

    def test_extended_record_is_a_commit_record(self, numstat_log):
        commit = parse_extended(numstat_log)[1]

        assert isinstance(commit, CommitRecord)
        assert commit.author_name == "B"
        assert commit.parents == ("a" * 40,)

    def test_commit_without_deltas(self):
        raw = "\n".join(
            [
                header_line("m" * 40, "A", "a@example.com", "2025-01-03", "x y"),
                header_line("a" * 40, "A", "a@example.com", "2025-01-01"),
                "",
                "1\t0\tfile.txt",
            ]
        )
        commits = parse_extended(raw)

        assert commits[0].files == ()
        assert commits[1].files == (FileDelta("file.txt", 1, 0),)

    def test_malformed_delta_lines_are_skipped(self):
        raw = "\n".join(
            [
                "4\t4\torphan.txt",
                header_line("a" * 40, "A", "a@example.com", "2025-01-01"),
                "not a numstat line",
                "2\t1\tkept.txt",
            ]
        )
        commits = parse_extended(raw)

        assert len(commits) == 1
        assert commits[0].files == (FileDelta("kept.txt", 2, 1),)

    def test_malformed_header_drops_its_deltas(self):
        raw = "\n".join(
            [
                "commit" + SEP + "short" + SEP + "header",
                "9\t9\tlost.txt",
                header_line("a" * 40, "A", "a@example.com", "2025-01-01"),
                "1\t1\tkept.txt",
            ]
        )
        commits = parse_extended(raw)

        assert [c.id for c in commits] == ["a" * 40]
        assert commits[0].files == (FileDelta("kept.txt", 1, 1),)

    def test_path_with_tab_is_kept_whole(self):
        raw = header_line("a" * 40, "A", "a@example.com", "2025-01-01") + "\n1\t2\tdir/a\tb"
        assert parse_extended(raw)[0].files[0].path == "dir/a\tb"


def test_parse_branches():
    raw = "feature\tabc1234\t2025-01-03\nmain\tdef5678\t2025-01-05\n"

    assert parse_branches(raw) == [
        Branch("feature", "abc1234", "2025-01-03"),
        Branch("main", "def5678", "2025-01-05"),
    ]


def test_parse_author_identities_deduplicates():
    raw = "\n".join(
        [
            f"Alice{SEP}alice@example.com",
            f"Bob{SEP}bob@example.com",
            f"Alice{SEP}alice@example.com",
            "legacy line",
        ]
    )

    assert parse_author_identities(raw) == {
        "Alice <alice@example.com>",
        "Bob <bob@example.com>",
        "legacy line",
    }
