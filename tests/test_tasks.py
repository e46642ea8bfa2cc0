"""Tests for core task parsing and grouping."""

from datetime import date, datetime

import pytest

from setlog.core.tasks import (
    UNTAGGED_KEY,
    UNTAGGED_LABEL,
    TaskEntry,
    extract_link,
    extract_scheduled_date,
    extract_tag,
    find_entry,
    group_entries,
    parse_tasks,
    preselect,
    scan_checkbox,
)


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 9, 30)


@pytest.fixture
def tasks_doc():
    return "\n".join(
        [
            "# Workout",
            "- [ ] [[Squat]] #legs",
            "- [x] [[Deadlift]] #back",
            "- [ ] [[Bench]] #chest",
            "Some note with [[Squat]] in it",
            "- [ ] [[Plank]]",
            "- [ ] [[Lunge]] #legs ✅ 2025-01-10",
            "  * [ ] [[Curl]] #arms 🛫 2025-01-20",
            "- [X] [[Row]]",
        ]
    )


class TestScanCheckbox:
    def test_unchecked(self):
        cb = scan_checkbox("- [ ] Task")
        assert cb.is_unchecked
        assert cb.text == "Task"
        assert cb.bracket == 2

    def test_star_bullet_and_indent(self):
        cb = scan_checkbox("    * [ ]   Indented")
        assert cb.is_unchecked
        assert cb.text == "Indented"

    def test_no_space_after_bullet(self):
        cb = scan_checkbox("-[x] Done")
        assert cb.is_checked

    @pytest.mark.parametrize("line", ["", "plain text", "- item", "- [", "1. [ ] numbered"])
    def test_not_a_checkbox(self, line):
        assert scan_checkbox(line) is None

    def test_strips_carriage_return(self):
        assert scan_checkbox("- [ ] Task\r").text == "Task"


class TestExtractors:
    def test_link_first_only(self):
        assert extract_link("[[Squat]] then [[Bench]]") == "Squat"

    def test_link_skips_malformed(self):
        assert extract_link("[[]] and [[Bench]]") == "Bench"
        assert extract_link("[[broken] and [[Bench]]") == "Bench"

    def test_link_missing(self):
        assert extract_link("no link here") is None
        assert extract_link("[[unterminated") is None

    def test_tag_unicode(self):
        assert extract_tag("[[Присед]] #ноги") == "ноги"

    def test_tag_first_only(self):
        assert extract_tag("x #legs #chest") == "legs"

    def test_tag_stops_at_punctuation(self):
        assert extract_tag("#leg_day, later") == "leg_day"

    def test_tag_ignores_bare_hash(self):
        assert extract_tag("# heading and #real") == "real"
        assert extract_tag("nothing #") is None

    def test_scheduled_date(self):
        assert extract_scheduled_date("- [ ] x 🛫 2025-1-5") == date(2025, 1, 5)
        assert extract_scheduled_date("- [ ] x 🛫2025-01-05") == date(2025, 1, 5)

    def test_scheduled_date_invalid(self):
        assert extract_scheduled_date("- [ ] x 🛫 2025-13-40") is None
        assert extract_scheduled_date("- [ ] x 🛫 soon") is None
        assert extract_scheduled_date("- [ ] x 2025-01-05") is None


class TestParseTasks:
    def test_returns_unchecked_entries_in_order(self, tasks_doc, now):
        entries = parse_tasks(tasks_doc, now)
        assert [e.exercise_name for e in entries] == ["Squat", "Bench", "Plank"]
        assert [e.line_index for e in entries] == [1, 3, 5]

    def test_fields(self, tasks_doc, now):
        squat = parse_tasks(tasks_doc, now)[0]
        assert squat == TaskEntry(line_index=1, raw_text="[[Squat]] #legs", exercise_name="Squat", tag="legs")

    def test_never_returns_done_lines(self, tasks_doc, now):
        for entry in parse_tasks(tasks_doc, now):
            assert "✅" not in entry.raw_text
            assert entry.exercise_name not in ("Deadlift", "Row", "Lunge")

    def test_future_scheduled_excluded(self, now):
        assert parse_tasks("- [ ] [[Curl]] 🛫 2025-01-16", now) == []

    def test_scheduled_today_included(self, now):
        entries = parse_tasks("- [ ] [[Curl]] 🛫 2025-01-15", now)
        assert len(entries) == 1
        assert entries[0].scheduled_date == date(2025, 1, 15)

    def test_scheduled_past_included(self, now):
        assert len(parse_tasks("- [ ] [[Curl]] 🛫 2024-12-31", now)) == 1

    def test_far_future_excluded_regardless_of_checkbox(self):
        doc = "- [ ] [[Squat]] 🛫 2999-01-01\n- [x] [[Bench]] 🛫 2999-01-01"
        assert parse_tasks(doc) == []

    def test_entry_without_link(self, now):
        entry = parse_tasks("- [ ] Stretch for 10 minutes #mobility", now)[0]
        assert entry.exercise_name is None
        assert entry.display_name == "Stretch for 10 minutes #mobility"
        assert entry.tag == "mobility"

    def test_other_checkbox_states_skipped(self, now):
        assert parse_tasks("- [-] cancelled\n- [/] in progress", now) == []

    def test_crlf_document(self, now):
        entries = parse_tasks("- [ ] [[Squat]]\r\n- [ ] [[Bench]]\r\n", now)
        assert [e.raw_text for e in entries] == ["[[Squat]]", "[[Bench]]"]
        assert [e.line_index for e in entries] == [0, 1]

    def test_mixed_line_endings(self, now):
        entries = parse_tasks("- [ ] [[Squat]]\n- [ ] [[Bench]]\r\n- [ ] [[Plank]]", now)
        assert [e.raw_text for e in entries] == ["[[Squat]]", "[[Bench]]", "[[Plank]]"]
        assert [e.line_index for e in entries] == [0, 1, 2]

    def test_empty(self, now):
        assert parse_tasks("", now) == []


def _entry(i, tag):
    return TaskEntry(line_index=i, raw_text=f"task {i}", exercise_name=f"E{i}", tag=tag)


class TestGroupEntries:
    def test_groups_sorted_case_insensitively(self):
        entries = [_entry(0, "legs"), _entry(1, "Chest"), _entry(2, "arms")]
        groups = group_entries(entries)
        assert [g.tag for g in groups] == ["arms", "Chest", "legs"]

    def test_untagged_last(self):
        entries = [_entry(0, None), _entry(1, "zzz"), _entry(2, "aaa")]
        groups = group_entries(entries)
        assert groups[-1].is_untagged
        assert [g.tag for g in groups] == ["aaa", "zzz", None]

    def test_members_keep_order(self):
        entries = [_entry(0, "legs"), _entry(1, "chest"), _entry(2, "legs"), _entry(3, None)]
        groups = group_entries(entries)
        assert [(g.tag, g.indices) for g in groups] == [("chest", [1]), ("legs", [0, 2]), (None, [3])]

    def test_deterministic(self):
        entries = [_entry(0, "c"), _entry(1, "B"), _entry(2, "a"), _entry(3, None), _entry(4, "c")]
        first = group_entries(entries)
        second = group_entries(list(entries))
        assert first == second
        assert [(g.tag, g.indices) for g in first] == [("a", [2]), ("B", [1]), ("c", [0, 4]), (None, [3])]

    def test_tags_differing_in_case_share_a_group(self):
        entries = [_entry(0, "Legs"), _entry(1, "chest"), _entry(2, "legs")]
        groups = group_entries(entries)
        assert [(g.display_name, g.key, g.indices) for g in groups] == [
            ("Chest", "chest", [1]),
            ("Legs", "legs", [0, 2]),
        ]

    def test_display_names(self):
        groups = group_entries([_entry(0, "legs"), _entry(1, None), _entry(2, "ноги")])
        assert [g.display_name for g in groups] == ["Legs", "Ноги", UNTAGGED_LABEL]

    def test_keys_are_lowercase(self):
        groups = group_entries([_entry(0, "Legs"), _entry(1, None)])
        assert [g.key for g in groups] == ["legs", UNTAGGED_KEY]

    def test_empty(self):
        assert group_entries([]) == []


class TestPreselect:
    @pytest.fixture
    def entries(self):
        return [
            TaskEntry(0, "[[Squat]] #legs", "Squat", "legs"),
            TaskEntry(1, "[[Bench]] #chest", "Bench", "chest"),
            TaskEntry(2, "Stretch hamstrings", None, None),
        ]

    def test_empty(self):
        assert preselect([], "Squat") is None

    def test_defaults_to_first(self, entries):
        assert preselect(entries) == 0
        assert preselect(entries, "") == 0

    def test_remembered_by_name(self, entries):
        assert preselect(entries, "Bench") == 1

    def test_remembered_by_text(self, entries):
        assert preselect(entries, "hamstrings") == 2

    def test_unknown_remembered_falls_back(self, entries):
        assert preselect(entries, "Deadlift") == 0

    def test_find_entry_case_insensitive(self, entries):
        assert find_entry(entries, "bench") is entries[1]
        assert find_entry(entries, "deadlift") is None
