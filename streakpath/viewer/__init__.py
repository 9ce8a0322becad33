"""
StreakPath Viewer - Rendering and feedback components for the session screen.

This module provides:
- Challenge, feedback and completion rendering
- Synthesized feedback cues
"""

from .quiz import (
    get_quiz_css,
    render_progress_bar,
    render_challenge,
    render_feedback,
    render_content_error,
    render_completion,
)

from .feedback import (
    FeedbackKind,
    Tone,
    CUES,
    render_tones,
    to_wav_bytes,
    synthesize_cue,
    CueBuffer,
    FeedbackEmitter,
)

__all__ = [
    # Quiz
    "get_quiz_css",
    "render_progress_bar",
    "render_challenge",
    "render_feedback",
    "render_content_error",
    "render_completion",
    # Feedback
    "FeedbackKind",
    "Tone",
    "CUES",
    "render_tones",
    "to_wav_bytes",
    "synthesize_cue",
    "CueBuffer",
    "FeedbackEmitter",
]
