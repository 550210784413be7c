from wordboard import db
from wordboard.models import STATS_ROW_ID, UsageStatsRecord


class SqlStatsRepository:
    """Loads and saves the usage counters as one ``usage_stats`` row.

    Calls may come from background tasks, so each one pushes its own app
    context.
    """

    def __init__(self, app):
        self.app = app

    def load(self):
        with self.app.app_context():
            record = db.session.get(UsageStatsRecord, STATS_ROW_ID)
            return record.to_stats() if record else None

    def save(self, stats):
        with self.app.app_context():
            try:
                record = db.session.get(UsageStatsRecord, STATS_ROW_ID)
                if record is None:
                    record = UsageStatsRecord(id=STATS_ROW_ID)
                record.update_from(stats)
                db.session.add(record)
                db.session.commit()
            except Exception:
                db.session.rollback()
                raise
