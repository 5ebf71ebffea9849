"""Tests for the chronicle writer with a stubbed Anthropic client."""

from __future__ import annotations

from types import SimpleNamespace

import anthropic
import httpx
import pytest

from lantern.chronicle import ChronicleError, ChronicleWriter, build_weekly_summary
from lantern.weekly import WeeklyRecord


class FakeMessages:
    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=self.text)])


def _writer(messages: FakeMessages) -> ChronicleWriter:
    return ChronicleWriter(api_key="", model="test-model", client=SimpleNamespace(messages=messages))


def test_generate_returns_stripped_story_and_sends_summary():
    messages = FakeMessages(text="  The lantern glowed by the river.  ")
    story = _writer(messages).generate("Week 2 of the journey.", week=2)

    assert story == "The lantern glowed by the river."
    call = messages.calls[0]
    assert call["model"] == "test-model"
    assert "Week 2 of the journey." in call["messages"][0]["content"]
    assert "Grey Havens" in call["messages"][0]["content"]


def test_missing_api_key_fails_fast():
    with pytest.raises(ChronicleError) as exc_info:
        ChronicleWriter(api_key="")
    assert "ANTHROPIC_API_KEY" in exc_info.value.hint


def test_from_config_without_secret_fails():
    with pytest.raises(ChronicleError):
        ChronicleWriter.from_config({"_secrets": {"anthropic_api_key": ""}})


def test_timeout_becomes_chronicle_error():
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    messages = FakeMessages(error=anthropic.APITimeoutError(request=request))
    with pytest.raises(ChronicleError) as exc_info:
        _writer(messages).generate("summary", week=4)
    assert exc_info.value.week == 4


def test_empty_reply_is_an_error():
    with pytest.raises(ChronicleError):
        _writer(FakeMessages(text="   ")).generate("summary", week=1)


def test_weekly_summary_lists_council_details():
    record = WeeklyRecord(
        week=3,
        resolved_conflicts=3,
        unresolved_conflicts=1,
        lantern_elf=4,
        lantern_hobbit=5,
        distance=9,
        story_notes="Shared bread at dusk.",
    )
    summary = build_weekly_summary(record, note="The shared lantern burned bright.")

    assert summary.startswith("Week 3 of the journey.")
    assert "(resolve ratio 75%)." in summary
    assert "average 4.5" in summary
    assert "Story notes: Shared bread at dusk." in summary
    assert "Notable event" not in summary
    assert summary.endswith("Scribe's reading: The shared lantern burned bright.")


def test_weekly_summary_without_conflicts_has_no_ratio():
    summary = build_weekly_summary(WeeklyRecord(week=1))
    assert "resolve ratio" not in summary
