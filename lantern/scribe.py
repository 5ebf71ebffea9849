"""The scribe's note: a short reading of a week's lantern and morale.

Both metrics use the same threshold ladder; each has its own phrasing.
Week-over-week changes go through a dead band so sub-threshold wobble reads
as "about the same" instead of flipping the wording back and forth.
"""

from __future__ import annotations

from .weekly import WeeklyRecord

BRIGHT = "bright"
STEADY = "steady"
FLICKERING = "flickering"
LOW = "low"

# (lower bound, band), checked top-down.
LEVEL_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (4.2, BRIGHT),
    (3.4, STEADY),
    (2.6, FLICKERING),
)

UNCHANGED = "unchanged"
SLIGHTLY_IMPROVED = "slightly improved"
CLEARLY_IMPROVED = "clearly improved"
SLIGHTLY_DECLINED = "slightly declined"
CLEARLY_DECLINED = "clearly declined"

CHANGE_DEAD_BAND = 0.15
CHANGE_CLEAR = 0.6

LANTERN_LEVEL_TEXT = {
    BRIGHT: "The shared lantern burned bright and steady, with a strong sense of mutual safety.",
    STEADY: (
        "The shared lantern burned with a gentle, steady light; safety was mostly felt, "
        "though a few moments wavered."
    ),
    FLICKERING: (
        "The shared lantern flickered between light and shadow; safety was sometimes felt, "
        "sometimes lost."
    ),
    LOW: "The shared lantern burned low, and safety felt fragile and easily shaken.",
}

MORALE_LEVEL_TEXT = {
    BRIGHT: "The mood of the journey was quietly hopeful, with spirits generally high.",
    STEADY: (
        "The mood of the journey was modestly hopeful, with some heaviness but more light "
        "than shadow."
    ),
    FLICKERING: (
        "The overall mood of the journey was middling, neither bleak nor radiant, with hearts "
        "still weighing recent days."
    ),
    LOW: "The mood of the journey was heavy, as doubts and weariness pressed close to their steps.",
}

CHANGE_TEXT = {
    UNCHANGED: "is about the same as last week.",
    SLIGHTLY_IMPROVED: "has grown a little brighter than last week.",
    CLEARLY_IMPROVED: "is clearly brighter than last week.",
    SLIGHTLY_DECLINED: "has faded slightly compared with last week.",
    CLEARLY_DECLINED: "is noticeably lower than last week.",
}


def classify_level(
    average: float,
    thresholds: tuple[tuple[float, str], ...] = LEVEL_THRESHOLDS,
) -> str:
    for bound, band in thresholds:
        if average >= bound:
            return band
    return LOW


def classify_change(current: float, previous: float) -> str:
    diff = current - previous
    size = abs(diff)
    if size < CHANGE_DEAD_BAND:
        return UNCHANGED
    if diff > 0:
        return SLIGHTLY_IMPROVED if size < CHANGE_CLEAR else CLEARLY_IMPROVED
    return SLIGHTLY_DECLINED if size < CHANGE_CLEAR else CLEARLY_DECLINED


def describe_lantern_level(average: float) -> str:
    return LANTERN_LEVEL_TEXT[classify_level(average)]


def describe_morale_level(average: float) -> str:
    return MORALE_LEVEL_TEXT[classify_level(average)]


def describe_change(current: float, previous: float) -> str:
    return CHANGE_TEXT[classify_change(current, previous)]


def build_narrative(
    week: int,
    lantern_average: float,
    morale_average: float,
    previous: WeeklyRecord | None = None,
) -> str:
    """Assemble the scribe's note for ``week``.

    Without a previous council (or in week one) the note is just the two
    level descriptions; otherwise two comparison sentences follow.
    """
    text = f"{describe_lantern_level(lantern_average)} {describe_morale_level(morale_average)}"
    if previous is None or week == 1:
        return text

    lantern_change = describe_change(lantern_average, previous.lantern_average)
    morale_change = describe_change(morale_average, previous.morale_average)
    return (
        f"{text} This week, the shared lantern {lantern_change} "
        f"The journey morale {morale_change}"
    )
