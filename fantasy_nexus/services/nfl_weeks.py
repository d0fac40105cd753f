# fantasy_nexus/services/nfl_weeks.py
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

logger = logging.getLogger("app.nfl_weeks")

DEFAULT_TZ = os.getenv("NFL_TZ", "America/Chicago")

# Fantasy week: Thursday 00:00 local -> following Wednesday 00:00 local.
# Week 1 starts the Thursday after Labor Day (first Monday of September).
WEEK = timedelta(days=7)
WINDOW_WIDTH = timedelta(days=6)


@dataclass(frozen=True)
class WeekWindow:
    week: int
    start: datetime  # UTC, inclusive
    end: datetime  # UTC, exclusive
    season_year: int

    def contains(self, when: datetime) -> bool:
        return is_within_window(when, self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week": self.week,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "seasonYear": self.season_year,
        }


@dataclass(frozen=True)
class ManualWeek:
    week: int
    start: date
    end: date  # inclusive


def _table(rows: Iterable[Tuple[int, str, str]]) -> Tuple[ManualWeek, ...]:
    return tuple(
        ManualWeek(week=w, start=date.fromisoformat(s), end=date.fromisoformat(e))
        for w, s, e in rows
    )


# Published schedule wins over the Thursday-anchored math when present.
WEEK_OVERRIDES: Dict[int, Tuple[ManualWeek, ...]] = {
    2025: _table([
        (1, "2025-09-05", "2025-09-10"),
        (2, "2025-09-11", "2025-09-17"),
        (3, "2025-09-18", "2025-09-24"),
        (4, "2025-09-25", "2025-10-01"),
        (5, "2025-10-02", "2025-10-08"),
        (6, "2025-10-09", "2025-10-15"),
        (7, "2025-10-16", "2025-10-22"),
        (8, "2025-10-23", "2025-10-29"),
        (9, "2025-10-30", "2025-11-05"),
        (10, "2025-11-06", "2025-11-12"),
        (11, "2025-11-13", "2025-11-19"),
        (12, "2025-11-20", "2025-11-26"),
        (13, "2025-11-27", "2025-12-03"),
        (14, "2025-12-04", "2025-12-10"),
        (15, "2025-12-11", "2025-12-17"),
        (16, "2025-12-18", "2025-12-24"),
        (17, "2025-12-25", "2025-12-31"),
        (18, "2026-01-01", "2026-01-07"),
    ]),
}


def as_utc(instant: datetime) -> datetime:
    # naive datetimes are taken to be UTC
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def labor_day(year: int) -> date:
    """First Monday of September."""
    d = date(year, 9, 1)
    # weekday(): Monday=0 ... Sunday=6
    return d + timedelta(days=(0 - d.weekday()) % 7)


def season_start_thursday(year: int) -> date:
    """Thursday after Labor Day."""
    return labor_day(year) + timedelta(days=3)


def season_year_for(instant: datetime) -> int:
    """Jan/Feb belong to the season that kicked off the previous September."""
    utc = as_utc(instant)
    return utc.year - 1 if utc.month <= 2 else utc.year


def tz_offset(instant: datetime, tz: str = DEFAULT_TZ) -> timedelta:
    """UTC offset of `tz` at this exact instant (DST-aware)."""
    return as_utc(instant).astimezone(ZoneInfo(tz)).utcoffset() or timedelta(0)


def manual_week_for(
    instant: datetime,
    season_year: int,
    overrides: Optional[Dict[int, Tuple[ManualWeek, ...]]] = None,
) -> Optional[WeekWindow]:
    """
    Look the instant's UTC calendar date up in the season's published table.
    Bounds are UTC midnight of the start date through end-of-day of the end date.
    """
    table = (WEEK_OVERRIDES if overrides is None else overrides).get(season_year)
    if not table:
        return None
    day = as_utc(instant).date()
    for row in table:
        if row.start <= day <= row.end:
            return WeekWindow(
                week=row.week,
                start=datetime.combine(row.start, time.min, tzinfo=timezone.utc),
                end=datetime.combine(row.end, time.max, tzinfo=timezone.utc),
                season_year=season_year,
            )
    return None


@lru_cache(maxsize=None)
def _note_computed_season(season_year: int) -> None:
    logger.info("NFL weeks: no manual table for season=%s, using computed windows", season_year)


def week_window_for(
    instant: datetime,
    season_year: Optional[int] = None,
    tz: str = DEFAULT_TZ,
    overrides: Optional[Dict[int, Tuple[ManualWeek, ...]]] = None,
) -> WeekWindow:
    """
    Resolve the fantasy week window containing `instant`.

    Manual table first; otherwise the Thursday-anchored window in `tz`,
    with anything before the opener clamped into week 1. The local->UTC
    conversion reuses the offset at `instant` for both bounds, so a DST
    switch inside the window shifts `end` by an hour.
    """
    utc = as_utc(instant)
    season = season_year if season_year is not None else season_year_for(utc)
    table = WEEK_OVERRIDES if overrides is None else overrides

    mapped = manual_week_for(utc, season, table)
    if mapped:
        logger.debug("NFL weeks: manual mapping week=%s season=%s", mapped.week, season)
        return mapped
    if season not in table:
        _note_computed_season(season)

    offset = tz_offset(utc, tz)
    now_local = (utc + offset).replace(tzinfo=None)
    local_midnight = datetime.combine(now_local.date(), time.min)
    # weekday(): Thursday=3
    start_local = local_midnight - timedelta(days=(local_midnight.weekday() - 3) % 7)

    opener_local = datetime.combine(season_start_thursday(season), time.min)
    if start_local < opener_local:
        start_local = opener_local

    week = (start_local - opener_local) // WEEK + 1
    end_local = start_local + WINDOW_WIDTH

    logger.debug(
        "NFL weeks: computed input=%s offset=%s start_local=%s week=%s season=%s",
        utc.isoformat(), offset, start_local.isoformat(), week, season,
    )
    return WeekWindow(
        week=week,
        start=(start_local - offset).replace(tzinfo=timezone.utc),
        end=(end_local - offset).replace(tzinfo=timezone.utc),
        season_year=season,
    )


def window_for_week(
    season_year: int,
    week: int,
    tz: str = DEFAULT_TZ,
    overrides: Optional[Dict[int, Tuple[ManualWeek, ...]]] = None,
) -> WeekWindow:
    """Window for an explicit (season, week); week < 1 is treated as week 1."""
    week = max(1, week)
    table = WEEK_OVERRIDES if overrides is None else overrides
    for row in table.get(season_year, ()):
        if row.week == week:
            return WeekWindow(
                week=week,
                start=datetime.combine(row.start, time.min, tzinfo=timezone.utc),
                end=datetime.combine(row.end, time.max, tzinfo=timezone.utc),
                season_year=season_year,
            )

    start_local = datetime.combine(season_start_thursday(season_year), time.min) + (week - 1) * WEEK
    offset = ZoneInfo(tz).utcoffset(start_local) or timedelta(0)
    return WeekWindow(
        week=week,
        start=(start_local - offset).replace(tzinfo=timezone.utc),
        end=(start_local + WINDOW_WIDTH - offset).replace(tzinfo=timezone.utc),
        season_year=season_year,
    )


def is_within_window(when: datetime, window: WeekWindow) -> bool:
    return window.start <= as_utc(when) < window.end


def parse_kickoff(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return as_utc(value)
    if not value or not isinstance(value, str):
        return None
    try:
        return as_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
    except ValueError:
        return None


def filter_within_window(
    items: Iterable[Dict[str, Any]],
    window: WeekWindow,
    key: str = "commence_time",
) -> List[Dict[str, Any]]:
    """Keep items whose kickoff falls in the window; missing/unparseable kickoffs are dropped."""
    out: List[Dict[str, Any]] = []
    for it in items:
        kick = parse_kickoff(it.get(key))
        if kick is not None and is_within_window(kick, window):
            out.append(it)
    return out


def load_week_overrides(path: str) -> Dict[int, Tuple[ManualWeek, ...]]:
    """
    Merge a JSON file of published schedules over the built-in table:
      {"2026": [{"week": 1, "start": "2026-09-10", "end": "2026-09-16"}, ...]}
    """
    with open(path, "r", encoding="utf-8") as fh:
        raw = json.load(fh)
    if not isinstance(raw, dict):
        raise ValueError(f"week overrides must be an object keyed by season: {path}")

    merged = dict(WEEK_OVERRIDES)
    for season, rows in raw.items():
        try:
            merged[int(season)] = _table((int(r["week"]), r["start"], r["end"]) for r in rows)
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"bad week overrides for season {season}: {e}") from e
    logger.info("NFL weeks: loaded overrides for seasons %s from %s", sorted(raw), path)
    return merged


@lru_cache(maxsize=1)
def configured_overrides() -> Dict[int, Tuple[ManualWeek, ...]]:
    path = os.getenv("NFL_WEEK_OVERRIDES_FILE")
    return load_week_overrides(path) if path else WEEK_OVERRIDES


def current_week_window(
    now: Optional[datetime] = None,
    season_year: Optional[int] = None,
    tz: str = DEFAULT_TZ,
) -> WeekWindow:
    return week_window_for(
        now or datetime.now(timezone.utc),
        season_year=season_year,
        tz=tz,
        overrides=configured_overrides(),
    )
