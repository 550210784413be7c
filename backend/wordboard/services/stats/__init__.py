"""Usage statistics collaborator.

The board core only talks to it through ``StatsNotifier``; nothing it
returns is consulted.
"""
from .notifier import StatsNotifier
from .repository import SqlStatsRepository
from .service import UsageStats

__all__ = ['StatsNotifier', 'SqlStatsRepository', 'UsageStats']
