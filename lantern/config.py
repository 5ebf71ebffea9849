"""Configuration loading from settings.yaml and .env."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import yaml
from dotenv import load_dotenv

from journey.clock import parse_date
from journey.path import DEFAULT_SAMPLES_PER_SEGMENT

DEFAULT_START_DATE = date(2025, 11, 16)
DEFAULT_TOTAL_DAYS = 90


@dataclass(frozen=True)
class JourneySettings:
    start_date: date = DEFAULT_START_DATE
    total_days: int = DEFAULT_TOTAL_DAYS
    samples_per_segment: int = DEFAULT_SAMPLES_PER_SEGMENT
    animation_seconds: float = 1.5


def load_config(
    config_dir: str | Path | None = None,
) -> dict:
    """Load settings.yaml and .env, return merged config dict."""
    if config_dir is None:
        config_dir = Path(__file__).resolve().parent.parent / "config"
    config_dir = Path(config_dir)

    # Load .env (silently skip if missing)
    env_path = config_dir / ".env"
    load_dotenv(env_path)

    settings_path = config_dir / "settings.yaml"
    if not settings_path.exists():
        raise FileNotFoundError(f"Config not found: {settings_path}")

    with open(settings_path, encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    cfg["_secrets"] = {
        "anthropic_api_key": os.getenv("ANTHROPIC_API_KEY", ""),
    }

    return cfg


def journey_settings(cfg: dict) -> JourneySettings:
    """Read the journey section, falling back to defaults for bad values."""
    section = cfg.get("journey", {}) or {}

    raw_start = section.get("start_date")
    if isinstance(raw_start, date):
        start = raw_start
    else:
        start = parse_date(str(raw_start or "")) or DEFAULT_START_DATE

    try:
        total_days = max(1, int(section.get("total_days", DEFAULT_TOTAL_DAYS)))
    except (TypeError, ValueError):
        total_days = DEFAULT_TOTAL_DAYS

    try:
        samples = max(1, int(section.get("samples_per_segment", DEFAULT_SAMPLES_PER_SEGMENT)))
    except (TypeError, ValueError):
        samples = DEFAULT_SAMPLES_PER_SEGMENT

    try:
        animation = max(0.0, float(section.get("animation_seconds", 1.5)))
    except (TypeError, ValueError):
        animation = 1.5

    return JourneySettings(
        start_date=start,
        total_days=total_days,
        samples_per_segment=samples,
        animation_seconds=animation,
    )
