"""Calendar periods for usage counters.

All dates are UTC. Weeks start on Monday.
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def today(now: Optional[datetime] = None) -> str:
    return _now(now).date().isoformat()


def week_start(now: Optional[datetime] = None) -> str:
    day = _now(now).date()
    return (day - timedelta(days=day.weekday())).isoformat()


def current_month(now: Optional[datetime] = None) -> Tuple[int, int]:
    current = _now(now)
    return current.month, current.year


def empty_period() -> Dict[str, int]:
    return {'gamesCreated': 0, 'gamesCompleted': 0}


def initial_stats(now: Optional[datetime] = None) -> dict:
    now = _now(now)
    month, year = current_month(now)
    return {
        'daily': {'date': today(now), **empty_period()},
        'weekly': {'startDate': week_start(now), **empty_period()},
        'monthly': {'month': month, 'year': year, **empty_period()},
        'allTime': {'totalGames': 0, 'serverStartTime': now.isoformat()},
    }


def periods_to_reset(stats: dict, now: Optional[datetime] = None) -> Dict[str, bool]:
    month, year = current_month(now)
    return {
        'daily': stats['daily'].get('date') != today(now),
        'weekly': stats['weekly'].get('startDate') != week_start(now),
        'monthly': stats['monthly'].get('month') != month or stats['monthly'].get('year') != year,
    }


def reset_periods(stats: dict, flags: Dict[str, bool], now: Optional[datetime] = None) -> dict:
    """Return a copy of ``stats`` with the flagged periods zeroed for the current date."""
    fresh = dict(stats)
    if flags.get('daily'):
        fresh['daily'] = {'date': today(now), **empty_period()}
    if flags.get('weekly'):
        fresh['weekly'] = {'startDate': week_start(now), **empty_period()}
    if flags.get('monthly'):
        month, year = current_month(now)
        fresh['monthly'] = {'month': month, 'year': year, **empty_period()}
    return fresh
