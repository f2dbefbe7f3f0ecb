"""Submission values and their storage encoding.

A stored ``submission_value`` is a plain string (or NULL). Its meaning depends
on the vote type and on a few reserved strings:

- yes/no: ``"yes"`` or ``"no"``
- multiple choice: a JSON array of choices, even for single select; a choice
  is an option id, or ``USER_OPTION:<text>`` for an option the voter added
- free text: the text itself
- NULL (or an empty free-text answer): an empty vote
- ``ANONYMOUS_VOTED_STUB``: placeholder row that only records that a voter
  of an anonymous free-text vote has voted
- ``ANONYMOUS_VOTED_STUB`` and ``ANONYMOUS_CONTENT`` are never stored as
  free-text answers

This module is the only place that knows about that encoding. Everything else
works with the variants below.
"""
import json
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from classvote.core.constants import ANONYMOUS_VOTED_STUB, RESERVED_ANSWERS, USER_OPTION_PREFIX


@dataclass(frozen=True)
class CustomOption:
    """An option added by the voter at submission time."""
    text: str


Choice = Union[str, CustomOption]


@dataclass(frozen=True)
class SingleChoice:
    choice: Choice


@dataclass(frozen=True)
class MultiChoice:
    choices: Tuple[Choice, ...]


@dataclass(frozen=True)
class FreeText:
    text: str


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class VotedStub:
    pass


@dataclass(frozen=True)
class Unparsed:
    """A multiple-choice value that is not a JSON array (legacy rows)."""
    raw: str


SubmissionValue = Union[SingleChoice, MultiChoice, FreeText, Empty, VotedStub, Unparsed]

EMPTY = Empty()
VOTED_STUB = VotedStub()


def encode_choice(choice: Choice) -> str:
    if isinstance(choice, CustomOption):
        return f"{USER_OPTION_PREFIX}{choice.text}"
    return choice


def parse_choice(raw: str) -> Choice:
    if raw.startswith(USER_OPTION_PREFIX):
        return CustomOption(raw[len(USER_OPTION_PREFIX):])
    return raw


def encode(value: SubmissionValue, vote_type: str) -> Optional[str]:
    """Serialize a submission value for storage."""
    if isinstance(value, Empty):
        return None
    if isinstance(value, VotedStub):
        return ANONYMOUS_VOTED_STUB
    if isinstance(value, FreeText):
        if value.text in RESERVED_ANSWERS:
            raise ValueError(f"Reserved value cannot be stored as free text: {value.text}")
        return value.text
    if isinstance(value, SingleChoice):
        if vote_type == "multiple_choice":
            return json.dumps([encode_choice(value.choice)], ensure_ascii=False)
        return encode_choice(value.choice)
    if isinstance(value, MultiChoice):
        return json.dumps([encode_choice(c) for c in value.choices], ensure_ascii=False)
    if isinstance(value, Unparsed):
        return value.raw
    raise TypeError(f"Unknown submission value: {value!r}")


def decode(raw: Optional[str], vote_type: str) -> SubmissionValue:
    """Parse a stored submission value.

    Never raises: multiple-choice values that are not a JSON array (legacy
    rows, hand-edited data) come back as ``Unparsed``.
    """
    if raw is None:
        return EMPTY
    if raw == ANONYMOUS_VOTED_STUB:
        return VOTED_STUB

    if vote_type == "free_text":
        return FreeText(raw) if raw != "" else EMPTY

    if vote_type == "multiple_choice":
        try:
            parsed = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            parsed = None

        if isinstance(parsed, list):
            choices = tuple(parse_choice(str(item)) for item in parsed)
            if not choices:
                return EMPTY
            if len(choices) == 1:
                return SingleChoice(choices[0])
            return MultiChoice(choices)

        return Unparsed(raw) if raw != "" else EMPTY

    if raw == "":
        return EMPTY
    return SingleChoice(parse_choice(raw))


def choices_of(value: SubmissionValue) -> Tuple[Choice, ...]:
    """All choices carried by a value, in submission order."""
    if isinstance(value, SingleChoice):
        return (value.choice,)
    if isinstance(value, MultiChoice):
        return value.choices
    return ()
