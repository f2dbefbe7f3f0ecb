"""Unit tests for result aggregation."""
import pytest
from datetime import datetime, timedelta, timezone

from classvote.core import messages
from classvote.core.constants import ANONYMOUS_CONTENT, ANONYMOUS_VOTED_STUB
from classvote.db.models import Submission, Vote
from classvote.services.results import (
    VIEWER_ADMIN,
    VIEWER_PUBLIC,
    aggregate_results,
    can_show_individual,
    count_results,
    free_text_answers,
)

OPTIONS = [{"id": "o1", "text": "劇"}, {"id": "o2", "text": "屋台"}, {"id": "o3", "text": "展示"}]
T0 = datetime(2026, 10, 19, 0, 0, tzinfo=timezone.utc)


def _vote(vote_type="yes_no", visibility="everyone", **kwargs):
    return Vote(
        id="v1",
        title="Test vote",
        vote_type=vote_type,
        visibility_setting=visibility,
        options=kwargs.pop("options", OPTIONS if vote_type == "multiple_choice" else []),
        allow_multiple_selections=kwargs.pop("allow_multiple_selections", False),
        total_expected_voters=kwargs.pop("total_expected_voters", 5),
        **kwargs,
    )


def _rows(*values):
    """Submissions from (attendance_number, raw value) pairs, in order."""
    return [
        Submission(
            id=f"s{i}",
            vote_id="v1",
            voter_attendance_number=voter,
            submission_value=raw,
            submitted_at=T0 + timedelta(seconds=i),
        )
        for i, (voter, raw) in enumerate(values)
    ]


@pytest.mark.unit
class TestCountResults:

    def test_yes_no_counts_in_first_seen_order(self):
        vote = _vote()
        rows = _rows(("1", "yes"), ("2", "no"), ("3", "yes"))
        assert count_results(vote, rows) == [{"name": "yes", "count": 2}, {"name": "no", "count": 1}]

    def test_recount_gives_same_result(self):
        vote = _vote()
        rows = _rows(("1", "yes"), ("2", "no"))
        assert count_results(vote, rows) == count_results(vote, rows)

    def test_empty_votes_are_not_counted(self):
        vote = _vote(allow_empty_votes=True)
        rows = _rows(("1", None), ("2", "no"))
        assert count_results(vote, rows) == [{"name": "no", "count": 1}]

    def test_multi_select_counts_each_choice(self):
        vote = _vote("multiple_choice", allow_multiple_selections=True)
        rows = _rows(("1", '["o1", "o2"]'), ("2", '["o2"]'))
        assert count_results(vote, rows) == [{"name": "劇", "count": 1}, {"name": "屋台", "count": 2}]

    def test_single_select_counts_first_choice_only(self):
        vote = _vote("multiple_choice", allow_multiple_selections=False)
        rows = _rows(("1", '["o1", "o2"]'))
        assert count_results(vote, rows) == [{"name": "劇", "count": 1}]

    def test_custom_option_label(self):
        vote = _vote("multiple_choice", allow_adding_options=True)
        rows = _rows(("1", '["USER_OPTION:お化け屋敷"]'))
        label = messages.CUSTOM_OPTION_LABEL.format(text="お化け屋敷")
        assert count_results(vote, rows) == [{"name": label, "count": 1}]

    def test_unknown_option_id(self):
        vote = _vote("multiple_choice")
        rows = _rows(("1", '["gone"]'))
        assert count_results(vote, rows) == [{"name": messages.UNKNOWN_OPTION_LABEL, "count": 1}]

    def test_legacy_plain_value(self):
        """Non-JSON multiple-choice rows count under their option text, or the raw value."""
        vote = _vote("multiple_choice")
        rows = _rows(("1", "o2"), ("2", "昔の回答"))
        assert count_results(vote, rows) == [
            {"name": "屋台", "count": 1},
            {"name": "昔の回答", "count": 1},
        ]

    def test_free_text_counts_identical_answers(self):
        vote = _vote("free_text")
        rows = _rows(("1", "楽しい"), ("2", "楽しい"), ("3", "難しい"))
        assert count_results(vote, rows) == [{"name": "楽しい", "count": 2}, {"name": "難しい", "count": 1}]

    def test_anonymous_stubs_are_skipped(self):
        vote = _vote("free_text", "anonymous")
        rows = _rows(
            ("1", ANONYMOUS_VOTED_STUB),
            (ANONYMOUS_CONTENT, "楽しい"),
        )
        assert count_results(vote, rows) == [{"name": "楽しい", "count": 1}]


@pytest.mark.unit
class TestVisibility:

    @pytest.mark.parametrize("visibility,public,admin", [
        ("everyone", True, True),
        ("admin_only", False, True),
        ("anonymous", False, False),
    ])
    def test_can_show_individual(self, visibility, public, admin):
        vote = _vote(visibility=visibility)
        assert can_show_individual(vote, VIEWER_PUBLIC) is public
        assert can_show_individual(vote, VIEWER_ADMIN) is admin


@pytest.mark.unit
class TestAggregateResults:

    def test_everyone_shows_individual_rows(self):
        vote = _vote("multiple_choice", allow_multiple_selections=True)
        rows = _rows(("1", '["o1", "o3"]'), ("2", None))

        results = aggregate_results(vote, rows, viewer=VIEWER_PUBLIC)

        assert results["individual_visible"] is True
        assert results["total_submissions"] == 2
        assert results["individual"] == [
            {"attendance_number": "1", "display_value": "劇, 展示"},
            {"attendance_number": "2", "display_value": messages.EMPTY_VOTE_LABEL},
        ]

    def test_admin_only_hides_rows_from_public(self):
        vote = _vote(visibility="admin_only")
        rows = _rows(("1", "yes"))

        public = aggregate_results(vote, rows, viewer=VIEWER_PUBLIC)
        admin = aggregate_results(vote, rows, viewer=VIEWER_ADMIN)

        assert public["individual"] == []
        assert public["series"] == [{"name": "yes", "count": 1}]
        assert admin["individual"] == [{"attendance_number": "1", "display_value": "yes"}]

    def test_hidden_free_text_has_no_series(self):
        """Free-text counts would reveal the answers themselves."""
        vote = _vote("free_text", visibility="admin_only")
        rows = _rows(("1", "秘密の意見"))

        results = aggregate_results(vote, rows, viewer=VIEWER_PUBLIC)

        assert results["series"] == []
        assert results["total_submissions"] == 1

    def test_anonymous_free_text_admin_sees_count_only(self):
        vote = _vote("free_text", visibility="anonymous")
        rows = _rows(("1", ANONYMOUS_VOTED_STUB), (ANONYMOUS_CONTENT, "意見"))

        results = aggregate_results(vote, rows, viewer=VIEWER_ADMIN)

        assert results["individual_visible"] is False
        assert results["individual"] == []
        assert results["series"] == []
        assert results["total_submissions"] == 1


@pytest.mark.unit
def test_free_text_answers_skips_empty_and_stubs():
    vote = _vote("free_text", "anonymous", allow_empty_votes=True)
    rows = _rows(
        ("1", ANONYMOUS_VOTED_STUB),
        (ANONYMOUS_CONTENT, "A"),
        ("2", ANONYMOUS_VOTED_STUB),
        (ANONYMOUS_CONTENT, None),
    )
    assert free_text_answers(vote, rows) == ["A"]
