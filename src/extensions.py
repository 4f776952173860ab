"""Flask extensions and database setup."""
from flask_sqlalchemy import SQLAlchemy
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from src.config import get_ratelimit_storage_uri

# SQLAlchemy instance
db = SQLAlchemy()

# Rate limiter - shared through Redis when REDIS_URL is set
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "300 per hour"],
    storage_uri=get_ratelimit_storage_uri(),
    strategy="fixed-window",
)
