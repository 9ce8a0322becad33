"""
Quiz renderer - HTML for the lesson session screen.

Provides:
- Challenge card rendering (question, image, retry badge)
- Answer feedback panel
- Progress bar, content-error panel and completion card
"""

import html
from typing import Optional

from streakpath.schemas import (
    Challenge,
    CompletionEvent,
    QuestionType,
    SessionProgress,
    SubmissionStatus,
)
from streakpath.utils.config import EngineConfig

from streakpath.classroom.validator import correct_answer_display


def get_quiz_css() -> str:
    """Get CSS styles for the session screen."""
    return """
    <style>
    .quiz-progress {
        height: 1em;
        background: #e5e7eb;
        border-radius: 999px;
        overflow: hidden;
        margin-bottom: 1.5em;
    }
    .quiz-progress-fill {
        height: 100%;
        background: #22c55e;
        transition: width 0.5s;
    }
    .quiz-header {
        display: flex;
        align-items: center;
        gap: 0.6em;
        font-size: 1.5em;
        font-weight: 700;
        color: #374151;
        margin-bottom: 1em;
    }
    .quiz-retry-badge {
        font-size: 0.55em;
        background: #ffedd5;
        color: #ea580c;
        padding: 0.3em 0.8em;
        border-radius: 999px;
    }
    .quiz-card {
        background: white;
        border: 2px solid #f3f4f6;
        border-radius: 16px;
        padding: 1.5em;
        margin-bottom: 1.5em;
    }
    .quiz-card img {
        width: 100%;
        max-height: 16em;
        object-fit: contain;
        margin-bottom: 1em;
    }
    .quiz-question {
        font-size: 1.15em;
        color: #1f2937;
        line-height: 1.6;
    }
    .quiz-feedback {
        border-radius: 12px;
        padding: 1em;
        margin-top: 1em;
    }
    .quiz-feedback-correct {
        background: #dcfce7;
        color: #15803d;
    }
    .quiz-feedback-incorrect {
        background: #fee2e2;
        color: #b91c1c;
    }
    .quiz-feedback-title {
        font-weight: 700;
    }
    .quiz-error {
        background: #fef2f2;
        border: 1px solid #fecaca;
        border-radius: 12px;
        padding: 1.2em;
        color: #ef4444;
        text-align: center;
    }
    .quiz-complete {
        background: #facc15;
        color: white;
        border-radius: 16px;
        padding: 2em;
        text-align: center;
    }
    .quiz-complete-title {
        font-size: 2em;
        font-weight: 800;
        margin-bottom: 1em;
    }
    .quiz-reward {
        display: inline-block;
        background: rgba(234, 179, 8, 0.5);
        border-radius: 16px;
        padding: 1em 1.5em;
        margin: 0 0.5em;
        font-size: 1.6em;
        font-weight: 800;
    }
    </style>
    """


def render_progress_bar(progress: SessionProgress) -> str:
    """Render the session progress bar; the width can shrink as retries are queued."""
    width = round(progress.percent, 1)
    return (
        '<div class="quiz-progress">'
        f'<div class="quiz-progress-fill" style="width: {width}%"></div>'
        '</div>'
    )


def render_challenge(challenge: Challenge) -> str:
    """
    Render the header and question card for a challenge.

    Args:
        challenge: Challenge being shown

    Returns:
        HTML string (options and inputs are rendered by the app)
    """
    parts = ['<div class="quiz-header">']
    if challenge.is_retry:
        parts.append('<span class="quiz-retry-badge">&#8635; Review</span>')
    if challenge.type == QuestionType.FILL_BLANK:
        parts.append('<span>Fill in the blanks</span>')
    else:
        parts.append('<span>Choose the correct answer</span>')
    parts.append('</div>')

    parts.append('<div class="quiz-card">')
    if challenge.image_url:
        parts.append(f'<img src="{html.escape(challenge.image_url, quote=True)}" alt="Question image"/>')
    parts.append(f'<div class="quiz-question">{html.escape(challenge.question)}</div>')
    parts.append('</div>')
    return ''.join(parts)


def render_feedback(
    challenge: Challenge,
    status: SubmissionStatus,
    config: Optional[EngineConfig] = None,
) -> str:
    """Render the post-check panel: praise or the correct answer, plus the explanation."""
    if status == SubmissionStatus.UNANSWERED:
        return ""

    explanation = html.escape(challenge.explanation or "")
    if status == SubmissionStatus.CORRECT:
        return (
            '<div class="quiz-feedback quiz-feedback-correct">'
            '<div class="quiz-feedback-title">&#10003; Great job!</div>'
            f'<div>{explanation}</div>'
            '</div>'
        )

    answer = html.escape(correct_answer_display(challenge, config))
    return (
        '<div class="quiz-feedback quiz-feedback-incorrect">'
        '<div class="quiz-feedback-title">&#10007; Incorrect</div>'
        f'<div>Correct answer: {answer}</div>'
        f'<div>{explanation}</div>'
        '</div>'
    )


def render_content_error(message: str) -> str:
    return (
        '<div class="quiz-error">'
        '<div class="quiz-feedback-title">This question could not be loaded</div>'
        f'<div>{html.escape(message)}</div>'
        '<div>Skip it and continue, or report it to an administrator.</div>'
        '</div>'
    )


def render_completion(event: CompletionEvent) -> str:
    """Render the lesson-complete card with the rewards earned."""
    return f"""
    <div class="quiz-complete">
        <div class="quiz-complete-title">Lesson complete!</div>
        <span class="quiz-reward">&#9889; {event.xp_delta} XP</span>
        <span class="quiz-reward">&#10084; {event.hearts_delta}</span>
    </div>
    """
