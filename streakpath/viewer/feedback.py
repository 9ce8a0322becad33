"""
Feedback cues - Short synthesized sounds for answer and completion events.

Provides:
- Tone synthesis (sine / triangle / square) to 16-bit mono WAV bytes
- FeedbackEmitter: fire-and-forget delivery of cues to a sink
- CueBuffer: sink that collects cues for the UI to play
"""

import io
import logging
import wave
from collections import deque
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Callable, Optional

import numpy as np

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050


class FeedbackKind(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Tone:
    """One note of a cue."""
    freq: float        # Hz
    waveform: str      # sine, triangle, square
    duration: float    # seconds
    start: float       # offset from cue start, seconds
    volume: float = 0.1


CUES: dict[FeedbackKind, tuple[Tone, ...]] = {
    # Major third "ding"
    FeedbackKind.CORRECT: (
        Tone(523.25, "sine", 0.3, 0.0),       # C5
        Tone(659.25, "sine", 0.6, 0.1),       # E5
    ),
    # Descending low "thud"
    FeedbackKind.INCORRECT: (
        Tone(200.0, "triangle", 0.3, 0.0, 0.15),
        Tone(150.0, "triangle", 0.4, 0.1, 0.15),
    ),
    # C major arpeggio
    FeedbackKind.COMPLETE: (
        Tone(523.25, "square", 0.2, 0.0, 0.05),
        Tone(659.25, "square", 0.2, 0.15, 0.05),
        Tone(783.99, "square", 0.2, 0.30, 0.05),
        Tone(1046.50, "square", 0.8, 0.45, 0.05),
    ),
}


def _oscillator(waveform: str, phase: np.ndarray) -> np.ndarray:
    if waveform == "sine":
        return np.sin(2 * np.pi * phase)
    if waveform == "square":
        return np.sign(np.sin(2 * np.pi * phase))
    if waveform == "triangle":
        return 2 * np.abs(2 * (phase - np.floor(phase + 0.5))) - 1
    raise ValueError(f"Unknown waveform: {waveform}")


def render_tones(tones: tuple[Tone, ...], sample_rate: int = SAMPLE_RATE, gain: float = 1.0) -> np.ndarray:
    """
    Mix tones into one float signal in [-1, 1].

    Each tone decays exponentially from its volume to 0.001 over its
    duration.
    """
    total = max(t.start + t.duration for t in tones)
    signal = np.zeros(int(np.ceil(total * sample_rate)), dtype=np.float64)

    for tone in tones:
        n = int(tone.duration * sample_rate)
        t = np.arange(n) / sample_rate
        envelope = tone.volume * np.power(0.001 / tone.volume, t / tone.duration)
        samples = _oscillator(tone.waveform, tone.freq * t) * envelope
        offset = int(tone.start * sample_rate)
        signal[offset:offset + n] += samples[: len(signal) - offset]

    return np.clip(signal * gain, -1.0, 1.0)


def to_wav_bytes(signal: np.ndarray, sample_rate: int = SAMPLE_RATE) -> bytes:
    pcm = (signal * 32767).astype("<i2")
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm.tobytes())
    return buffer.getvalue()


@lru_cache(maxsize=None)
def synthesize_cue(kind: FeedbackKind, gain: float = 1.0) -> bytes:
    """WAV bytes for a feedback cue."""
    return to_wav_bytes(render_tones(CUES[FeedbackKind(kind)], gain=gain))


CueSink = Callable[[FeedbackKind, bytes], None]


class CueBuffer:
    """Sink that keeps the most recent cues until the UI drains them."""

    def __init__(self, maxlen: int = 4):
        self._cues: deque[tuple[FeedbackKind, bytes]] = deque(maxlen=maxlen)

    def __call__(self, kind: FeedbackKind, data: bytes):
        self._cues.append((kind, data))

    def drain(self) -> list[tuple[FeedbackKind, bytes]]:
        drained = []
        while self._cues:
            drained.append(self._cues.popleft())
        return drained


class FeedbackEmitter:
    """
    Fire-and-forget feedback cues.

    emit() returns immediately; synthesis and delivery run on a worker and
    any failure there is logged and dropped. A passed-in executor may be
    shared between emitters and is left running by close().
    """

    def __init__(
        self,
        sink: CueSink,
        enabled: bool = True,
        volume: float = 1.0,
        executor: Optional[Executor] = None,
    ):
        self.sink = sink
        self.enabled = enabled
        self.volume = volume
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="feedback")

    def emit(self, kind: FeedbackKind | str):
        if not self.enabled:
            return
        try:
            self._executor.submit(self._deliver, FeedbackKind(kind))
        except Exception:
            logger.warning(f"Could not schedule feedback cue '{kind}'", exc_info=True)

    def _deliver(self, kind: FeedbackKind):
        try:
            self.sink(kind, synthesize_cue(kind, self.volume))
        except Exception:
            logger.warning(f"Feedback cue '{kind.value}' failed", exc_info=True)

    def close(self):
        """Wait for pending cues and stop the worker if this emitter created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)
