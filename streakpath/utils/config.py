"""
Engine configuration loader for StreakPath.

Loads answer-matching tokens, rewards and feedback settings from
config/engine.yaml.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


# Default config file (relative to project root)
CONFIG_DIR = Path(__file__).parent.parent.parent / "config"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "engine.yaml"


def normalize_token(value: Any) -> str:
    """Trim and case-fold, the comparison form for answers and tokens."""
    return str(value if value is not None else "").strip().casefold()


class EngineConfig(BaseModel):
    """
    Tunable inputs of the lesson engine.

    Token sets are stored normalized so they compare directly against
    normalized answers.
    """
    blank_delimiter: str = Field(default="||", min_length=1)

    # Answer-key synonyms for true/false questions
    true_tokens: frozenset[str] = frozenset({"true", "yes", "t", "正确", "对", "是"})
    false_tokens: frozenset[str] = frozenset({"false", "no", "f", "错误", "错", "否"})

    # Substrings marking a selected option's text as affirmative/negative
    true_markers: frozenset[str] = frozenset({"正确", "对"})
    false_markers: frozenset[str] = frozenset({"错误", "错"})

    # Conventional option ids and labels for synthesized true/false options
    true_slot: str = "a"
    false_slot: str = "b"
    true_label: str = "正确"
    false_label: str = "错误"

    xp_per_lesson: int = Field(default=10, ge=0)
    hearts_per_lesson: int = Field(default=1, ge=0)

    starting_xp: int = Field(default=0, ge=0)
    starting_hearts: int = Field(default=5, ge=0)
    starting_streak: int = Field(default=1, ge=1)

    feedback_enabled: bool = True
    feedback_volume: float = Field(default=1.0, ge=0.0, le=1.0)

    @field_validator(
        "true_tokens", "false_tokens", "true_markers", "false_markers",
        mode="before",
    )
    @classmethod
    def normalize_tokens(cls, value):
        if isinstance(value, str):
            value = [value]
        return frozenset(normalize_token(v) for v in value if normalize_token(v))

    @field_validator("true_slot", "false_slot")
    @classmethod
    def normalize_slot(cls, value: str) -> str:
        return normalize_token(value)


def load_engine_config(config_path: Optional[Path] = None) -> EngineConfig:
    """
    Load engine configuration from YAML.

    Args:
        config_path: Optional explicit config file. When omitted the
            default config/engine.yaml is used if present, otherwise the
            built-in defaults.

    Returns:
        Validated EngineConfig

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If values are out of range
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return EngineConfig()
        config_path = DEFAULT_CONFIG_PATH

    file_path = Path(config_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Engine config not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return EngineConfig(**data)
