"""Result aggregation.

Everything here is a pure function of a vote and its current submission rows;
results are recomputed on every request and never stored.
"""
from typing import Dict, Iterable, List

from classvote.core import messages
from classvote.core import submission_value as sv
from classvote.db.models import Submission, Vote

VIEWER_PUBLIC = "public"
VIEWER_ADMIN = "admin"


def can_show_individual(vote: Vote, viewer: str) -> bool:
    """
    Whether ``viewer`` may see who answered what.

    - everyone: public and admin
    - admin_only: admin only
    - anonymous: nobody
    """
    if vote.visibility_setting == "everyone":
        return True
    if vote.visibility_setting == "admin_only":
        return viewer == VIEWER_ADMIN
    return False


def choice_label(vote: Vote, choice: sv.Choice) -> str:
    if isinstance(choice, sv.CustomOption):
        return messages.CUSTOM_OPTION_LABEL.format(text=choice.text)
    if vote.vote_type == "yes_no":
        return choice
    for option in vote.options or []:
        if option["id"] == choice:
            return option["text"]
    return messages.UNKNOWN_OPTION_LABEL


def _unparsed_label(vote: Vote, raw: str) -> str:
    for option in vote.options or []:
        if option["id"] == raw:
            return option["text"]
    return raw


def value_labels(vote: Vote, value: sv.SubmissionValue) -> List[str]:
    """Labels a single submission counts towards."""
    if isinstance(value, sv.FreeText):
        return [value.text]
    if isinstance(value, sv.Unparsed):
        return [_unparsed_label(vote, value.raw)]

    choices = sv.choices_of(value)
    if vote.vote_type == "multiple_choice" and not vote.allow_multiple_selections:
        # Single select counts only the first choice
        choices = choices[:1]
    return [choice_label(vote, choice) for choice in choices]


def _counted_values(vote: Vote, submissions: Iterable[Submission]) -> List[sv.SubmissionValue]:
    values = []
    for submission in submissions:
        value = sv.decode(submission.submission_value, vote.vote_type)
        if isinstance(value, sv.VotedStub):
            continue
        values.append(value)
    return values


def count_results(vote: Vote, submissions: Iterable[Submission]) -> List[Dict]:
    """
    Count submissions per label, in first-seen order.

    Empty votes and anonymous stubs are not counted. Free-text answers are
    counted per identical string.

    Returns:
        Chart series: [{"name": label, "count": n}, ...]
    """
    counts: Dict[str, int] = {}
    for value in _counted_values(vote, submissions):
        for label in value_labels(vote, value):
            counts[label] = counts.get(label, 0) + 1
    return [{"name": name, "count": count} for name, count in counts.items()]


def display_value(vote: Vote, value: sv.SubmissionValue) -> str:
    if isinstance(value, sv.Empty):
        return messages.EMPTY_VOTE_LABEL
    if isinstance(value, sv.FreeText):
        return value.text
    if isinstance(value, sv.Unparsed):
        return _unparsed_label(vote, value.raw)
    return ", ".join(choice_label(vote, choice) for choice in sv.choices_of(value))


def aggregate_results(vote: Vote, submissions: List[Submission], viewer: str = VIEWER_PUBLIC) -> Dict:
    """
    Build the results view of a vote for one kind of viewer.

    Individual rows (and, for free-text votes, the answer counts, which
    would expose the answers themselves) are included only when the
    visibility setting allows it for ``viewer``.
    """
    show_individual = can_show_individual(vote, viewer)
    values = _counted_values(vote, submissions)

    if vote.vote_type == "free_text" and not show_individual:
        series: List[Dict] = []
    else:
        series = count_results(vote, submissions)

    individual: List[Dict] = []
    if show_individual:
        for submission in submissions:
            value = sv.decode(submission.submission_value, vote.vote_type)
            if isinstance(value, sv.VotedStub):
                continue
            individual.append({
                "attendance_number": submission.voter_attendance_number,
                "display_value": display_value(vote, value),
            })

    return {
        "vote_type": vote.vote_type,
        "total_submissions": len(values),
        "series": series,
        "individual_visible": show_individual,
        "individual": individual,
    }


def free_text_answers(vote: Vote, submissions: Iterable[Submission]) -> List[str]:
    """Non-empty free-text answers, the input for AI summarization."""
    return [
        value.text for value in _counted_values(vote, submissions)
        if isinstance(value, sv.FreeText)
    ]
