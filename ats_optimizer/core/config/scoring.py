from __future__ import annotations

import os
from fractions import Fraction
from pathlib import Path
from typing import Any

from .env import ConfigurationError

SECTION_KEYS = ("searchability", "hard_skills", "soft_skills", "recruiter_tips")

_SCORING_CONFIG_CACHE: dict[str, Any] | None = None
_DEFAULT_SCORING_CONFIG_PATH = Path(__file__).resolve().parents[3] / "config" / "scoring.yaml"


def _scoring_config_path() -> Path:
    override = (os.getenv("SCORING_CONFIG_PATH") or "").strip()
    return Path(override) if override else _DEFAULT_SCORING_CONFIG_PATH


def get_scoring_config() -> dict[str, Any]:
    """Load scoring config from repo-level config/scoring.yaml and cache it."""
    global _SCORING_CONFIG_CACHE

    if _SCORING_CONFIG_CACHE is not None:
        return _SCORING_CONFIG_CACHE

    path = _scoring_config_path()
    if not path.exists():
        raise ConfigurationError(
            f"Scoring config not found at '{path}'. "
            "Expected file: config/scoring.yaml"
        )

    try:
        import yaml  # type: ignore[import-not-found]
    except Exception as exc:
        raise ConfigurationError(
            "Unable to parse scoring config because PyYAML is unavailable. "
            "Install dependency: PyYAML."
        ) from exc

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to read scoring config '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:  # type: ignore[attr-defined]
        raise ConfigurationError(f"Invalid YAML in scoring config '{path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise ConfigurationError(
            f"Invalid scoring config '{path}': expected a top-level mapping."
        )

    _SCORING_CONFIG_CACHE = parsed
    return _SCORING_CONFIG_CACHE


def reset_scoring_config_cache() -> None:
    global _SCORING_CONFIG_CACHE
    _SCORING_CONFIG_CACHE = None


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'weights.hard_skills'."""
    if not path:
        return default

    current: Any = get_scoring_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current


def _exact(value: Any, label: str) -> Fraction:
    # str() first so 0.3 from YAML becomes exactly 3/10, not the nearest binary float.
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ConfigurationError(f"Scoring config value '{label}' must be a number.")
    try:
        return Fraction(str(value))
    except (ValueError, ZeroDivisionError) as exc:
        raise ConfigurationError(f"Scoring config value '{label}' is not a valid number: {value!r}") from exc


def scoring_weights() -> dict[str, Fraction]:
    weights: dict[str, Fraction] = {}
    for key in SECTION_KEYS:
        raw = get_scoring_value(f"weights.{key}")
        if raw is None:
            raise ConfigurationError(f"Scoring config is missing 'weights.{key}'.")
        weights[key] = _exact(raw, f"weights.{key}")
    return weights


def color_thresholds() -> tuple[int, int]:
    """Return (green, yellow) minimum scores."""
    green = get_scoring_value("colors.green_min", 90)
    yellow = get_scoring_value("colors.yellow_min", 75)
    if isinstance(green, bool) or isinstance(yellow, bool) or not isinstance(green, int) or not isinstance(yellow, int):
        raise ConfigurationError("Scoring config 'colors.*_min' values must be integers.")
    return green, yellow


def validate_scoring_config() -> None:
    weights = scoring_weights()
    negative = [key for key, value in weights.items() if value < 0]
    if negative:
        raise ConfigurationError(f"Scoring weights must be non-negative: {', '.join(negative)}.")
    total = sum(weights.values(), Fraction(0))
    if total != 1:
        raise ConfigurationError(f"Scoring weights must sum to exactly 1 (got {float(total):.4f}).")

    green, yellow = color_thresholds()
    if not 0 <= yellow <= green <= 100:
        raise ConfigurationError("Scoring colours require 0 <= yellow_min <= green_min <= 100.")
