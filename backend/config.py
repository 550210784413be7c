import os


def _env_bool(name, default):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///wordboard.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Create the stats table on startup so a fresh checkout runs without migrations
    CREATE_TABLES_ON_START = _env_bool('CREATE_TABLES_ON_START', True)
    # Comma separated list, '*' allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    # Sessions untouched for this long are dropped by the reaper (seconds)
    SESSION_IDLE_TIMEOUT_SEC = int(os.environ.get('SESSION_IDLE_TIMEOUT_SEC', '3600'))
    REAPER_INTERVAL_SEC = int(os.environ.get('REAPER_INTERVAL_SEC', '3600'))
    # Dirty usage counters are written back at this interval (seconds)
    STATS_FLUSH_INTERVAL_SEC = int(os.environ.get('STATS_FLUSH_INTERVAL_SEC', '30'))
    DEBUG = _env_bool('FLASK_DEBUG', False)
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '5000'))
