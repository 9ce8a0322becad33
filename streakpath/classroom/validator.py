"""
Answer validator - Decide correctness of a submitted answer.

Dispatches on question type:
- Choice types: option id, option text, then (true/false only) synonym polarity
- Fill-in-the-blank: ordered, per-blank normalized comparison

All checks are pure. Malformed content raises ContentError; any other
mismatch is simply incorrect.
"""

from typing import Callable, Optional, Sequence, Union

from streakpath.schemas import Challenge, Option, QuestionType
from streakpath.utils.config import EngineConfig, normalize_token


Submission = Union[str, Sequence[str], None]

DEFAULT_CONFIG = EngineConfig()


class ContentError(ValueError):
    """A challenge whose authored content cannot be graded."""

    def __init__(self, challenge_id: str, reason: str):
        super().__init__(f"Challenge {challenge_id}: {reason}")
        self.challenge_id = challenge_id
        self.reason = reason


# -----------------------------------------------------------------------------
# Content helpers
# -----------------------------------------------------------------------------

def effective_options(challenge: Challenge, config: EngineConfig = DEFAULT_CONFIG) -> list[Option]:
    """
    Options to present and grade against.

    A true/false challenge without authored options gets the canonical
    affirmative/negative pair in the configured slots.
    """
    if challenge.options:
        return list(challenge.options)
    if challenge.type == QuestionType.TRUE_FALSE:
        return [
            Option(id=config.true_slot, text=config.true_label),
            Option(id=config.false_slot, text=config.false_label),
        ]
    return []


def split_blanks(challenge: Challenge, config: EngineConfig = DEFAULT_CONFIG) -> list[str]:
    """Expected per-blank answers, e.g. "5||7" -> ["5", "7"]."""
    key = challenge.correct_answer or ""
    if not key.strip():
        return []
    return [part.strip() for part in key.split(config.blank_delimiter)]


def check_content(challenge: Challenge, config: EngineConfig = DEFAULT_CONFIG) -> None:
    """Raise ContentError if the challenge cannot be graded."""
    if not isinstance(challenge.type, QuestionType):
        raise ContentError(challenge.id, f"unknown question type '{challenge.type}'")
    if challenge.is_choice:
        if not effective_options(challenge, config):
            raise ContentError(challenge.id, "choice question has no options")
        return
    blanks = split_blanks(challenge, config)
    if not blanks:
        raise ContentError(challenge.id, "fill-in-the-blank answer key is empty")
    if any(not blank for blank in blanks):
        raise ContentError(challenge.id, "fill-in-the-blank answer key has an empty blank")


# -----------------------------------------------------------------------------
# Per-type validators
# -----------------------------------------------------------------------------

def _selected_option(options: list[Option], selected_id: str) -> Optional[Option]:
    for option in options:
        if normalize_token(option.id) == selected_id:
            return option
    return None


def _matches_id_or_text(challenge: Challenge, selected_id: str, selected_text: str) -> bool:
    answer = normalize_token(challenge.correct_answer)
    if selected_id == answer:
        return True
    return bool(selected_text) and selected_text == answer


def _check_choice(challenge: Challenge, submission: Submission, config: EngineConfig) -> bool:
    if not isinstance(submission, str):
        return False
    options = effective_options(challenge, config)
    selected_id = normalize_token(submission)
    option = _selected_option(options, selected_id)
    selected_text = normalize_token(option.text) if option else ""
    return _matches_id_or_text(challenge, selected_id, selected_text)


def _selection_polarity(selected_id: str, selected_text: str, config: EngineConfig) -> tuple[bool, bool]:
    is_true = (
        selected_id == config.true_slot
        or selected_text in config.true_tokens
        or any(marker in selected_text for marker in config.true_markers)
    )
    is_false = (
        selected_id == config.false_slot
        or selected_text in config.false_tokens
        or any(marker in selected_text for marker in config.false_markers)
    )
    return is_true, is_false


def _check_true_false(challenge: Challenge, submission: Submission, config: EngineConfig) -> bool:
    if not isinstance(submission, str):
        return False
    options = effective_options(challenge, config)
    selected_id = normalize_token(submission)
    option = _selected_option(options, selected_id)
    selected_text = normalize_token(option.text) if option else ""

    if _matches_id_or_text(challenge, selected_id, selected_text):
        return True

    answer = normalize_token(challenge.correct_answer)
    answer_is_true = answer in config.true_tokens
    answer_is_false = answer in config.false_tokens
    selection_is_true, selection_is_false = _selection_polarity(selected_id, selected_text, config)

    if answer_is_true and selection_is_true:
        return True
    if answer_is_false and selection_is_false:
        return True
    return False


def _check_fill_blank(challenge: Challenge, submission: Submission, config: EngineConfig) -> bool:
    if submission is None:
        return False
    if isinstance(submission, str):
        submission = [submission]
    expected = split_blanks(challenge, config)
    if len(submission) != len(expected):
        return False
    for given, wanted in zip(submission, expected):
        if normalize_token(given) != normalize_token(wanted):
            return False
    return True


_VALIDATORS: dict[QuestionType, Callable[[Challenge, Submission, EngineConfig], bool]] = {
    QuestionType.SINGLE_CHOICE: _check_choice,
    QuestionType.MULTIPLE_CHOICE: _check_choice,
    QuestionType.TRUE_FALSE: _check_true_false,
    QuestionType.FILL_BLANK: _check_fill_blank,
}


def is_correct(
    challenge: Challenge,
    submission: Submission,
    config: Optional[EngineConfig] = None,
) -> bool:
    """
    Grade a submission against a challenge.

    Args:
        challenge: Challenge being answered
        submission: Selected option id for choice types, list of per-blank
            strings for fill-in-the-blank
        config: Token sets and delimiter (defaults to built-in values)

    Returns:
        True only if one of the matching rules holds; unrecognised answer
        keys fall through to False

    Raises:
        ContentError: If the challenge itself is malformed
    """
    config = config or DEFAULT_CONFIG
    check_content(challenge, config)
    return _VALIDATORS[challenge.type](challenge, submission, config)


def correct_answer_display(challenge: Challenge, config: Optional[EngineConfig] = None) -> str:
    """Human-readable correct answer shown after a miss."""
    config = config or DEFAULT_CONFIG
    if challenge.type == QuestionType.FILL_BLANK:
        return ", ".join(split_blanks(challenge, config))
    for option in effective_options(challenge, config):
        if challenge.correct_answer in (option.id, option.text):
            return option.text
    return challenge.correct_answer
