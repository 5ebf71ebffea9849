"""Chronicle writer - turns a weekly council into a short story scene.

Uses the Anthropic Claude API. This is the one fallible remote call in the
project; the scribe's note in ``scribe.py`` never depends on it.
"""

from __future__ import annotations

import logging
from typing import Any

import anthropic
import httpx

from .weekly import WeeklyRecord, resolve_ratio

logger = logging.getLogger(__name__)

STORY_PROMPT = """\
You are telling a gentle fantasy story in a Lord-of-the-Rings-like world.
Two characters:
- Moeko: an Elf
- James: a Hobbit

They travel together on a symbolic journey toward the Grey Havens.
Each week, their relationship experiences are translated into a scene of this journey.

Weekly summary:
{summary}

Write a short story (150-220 words).
Tone: warm, grounded, mythic, quiet.
Avoid copying modern terminology.
Use imagery like lanterns, forests, rivers, moonlight.
"""


class ChronicleError(Exception):
    """Raised when a chronicle cannot be generated."""

    def __init__(self, message: str, week: int = 0, hint: str = ""):
        self.week = week
        self.hint = hint
        super().__init__(message)


def build_weekly_summary(record: WeeklyRecord, note: str = "") -> str:
    """Plain-text digest of a council, used as the story prompt input."""
    ratio = resolve_ratio(record)
    lines = [
        f"Week {record.week} of the journey.",
        f"Distance travelled (sum of daily points): {record.distance}.",
        f"Conflicts resolved calmly: {record.resolved_conflicts}; "
        f"left unresolved: {record.unresolved_conflicts}"
        + (f" (resolve ratio {ratio:.0%})." if ratio is not None else "."),
        f"Lantern brightness (safety): Elf {record.lantern_elf}/5, Hobbit {record.lantern_hobbit}/5, "
        f"average {record.lantern_average:.1f}.",
        f"Journey morale: Elf {record.morale_elf}/5, Hobbit {record.morale_hobbit}/5, "
        f"average {record.morale_average:.1f}.",
        f"Council focused on the right matters: {'yes' if record.worked_well else 'no'}.",
        f"Ceasefire compliance: {record.ceasefire_compliance:.0%}.",
    ]
    if record.story_notes.strip():
        lines.append(f"Story notes: {record.story_notes.strip()}")
    if record.story_event.strip():
        lines.append(f"Notable event: {record.story_event.strip()}")
    if note:
        lines.append(f"Scribe's reading: {note}")
    return "\n".join(lines)


class ChronicleWriter:
    """Generate weekly story scenes using Claude."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        temperature: float = 0.8,
        max_tokens: int = 400,
        timeout: float = 30.0,
        client: Any = None,
    ):
        if not api_key and client is None:
            raise ChronicleError(
                "Anthropic API key not set.",
                hint="Set ANTHROPIC_API_KEY in config/.env",
            )
        self._client = client or anthropic.Anthropic(
            api_key=api_key,
            timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
            max_retries=1,
        )
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    @classmethod
    def from_config(cls, cfg: dict) -> ChronicleWriter:
        llm = cfg.get("llm", {}) or {}
        return cls(
            api_key=cfg.get("_secrets", {}).get("anthropic_api_key", ""),
            model=llm.get("model", "claude-sonnet-4-20250514"),
            temperature=llm.get("temperature", 0.8),
            max_tokens=llm.get("max_tokens", 400),
            timeout=float(llm.get("timeout_seconds", 30)),
        )

    @property
    def model(self) -> str:
        return self._model

    def generate(self, summary: str, week: int = 0) -> str:
        """Call Claude and return the story text."""
        try:
            msg = self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                messages=[{"role": "user", "content": STORY_PROMPT.format(summary=summary)}],
            )
        except anthropic.APITimeoutError as exc:
            raise ChronicleError("Story generation timed out", week=week) from exc
        except anthropic.APIError as exc:
            raise ChronicleError(f"Story generation failed: {exc}", week=week) from exc

        text = "".join(
            getattr(block, "text", "") for block in msg.content
        ).strip()
        if not text:
            raise ChronicleError("Story generation returned no text", week=week)
        logger.debug("Generated chronicle (%d chars): %s", len(text), text[:80])
        return text
