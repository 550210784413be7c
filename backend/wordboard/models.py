from wordboard import db

STATS_ROW_ID = 1


class UsageStatsRecord(db.Model):
    """Single-row snapshot of the usage counters."""
    __tablename__ = 'usage_stats'
    id = db.Column(db.Integer, primary_key=True)
    daily_date = db.Column(db.String(10), nullable=False)
    daily_created = db.Column(db.Integer, default=0, nullable=False)
    daily_completed = db.Column(db.Integer, default=0, nullable=False)
    weekly_start = db.Column(db.String(10), nullable=False)
    weekly_created = db.Column(db.Integer, default=0, nullable=False)
    weekly_completed = db.Column(db.Integer, default=0, nullable=False)
    monthly_month = db.Column(db.Integer, nullable=False)
    monthly_year = db.Column(db.Integer, nullable=False)
    monthly_created = db.Column(db.Integer, default=0, nullable=False)
    monthly_completed = db.Column(db.Integer, default=0, nullable=False)
    total_games = db.Column(db.Integer, default=0, nullable=False)
    server_start_time = db.Column(db.String(40), nullable=True)

    def update_from(self, stats):
        daily, weekly, monthly, all_time = stats['daily'], stats['weekly'], stats['monthly'], stats['allTime']
        self.daily_date = daily['date']
        self.daily_created = daily['gamesCreated']
        self.daily_completed = daily['gamesCompleted']
        self.weekly_start = weekly['startDate']
        self.weekly_created = weekly['gamesCreated']
        self.weekly_completed = weekly['gamesCompleted']
        self.monthly_month = monthly['month']
        self.monthly_year = monthly['year']
        self.monthly_created = monthly['gamesCreated']
        self.monthly_completed = monthly['gamesCompleted']
        self.total_games = all_time['totalGames']
        self.server_start_time = all_time.get('serverStartTime')

    def to_stats(self):
        return {
            'daily': {
                'date': self.daily_date,
                'gamesCreated': self.daily_created,
                'gamesCompleted': self.daily_completed,
            },
            'weekly': {
                'startDate': self.weekly_start,
                'gamesCreated': self.weekly_created,
                'gamesCompleted': self.weekly_completed,
            },
            'monthly': {
                'month': self.monthly_month,
                'year': self.monthly_year,
                'gamesCreated': self.monthly_created,
                'gamesCompleted': self.monthly_completed,
            },
            'allTime': {
                'totalGames': self.total_games,
                'serverStartTime': self.server_start_time,
            },
        }
