import os

wsgi_app = "src.app:create_app()"
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:5000")
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "sync"
timeout = 120
keepalive = 5
max_requests = 1000
max_requests_jitter = 50

# Each worker runs create_app(); keep the countdown ticker out of the
# workers and run `flask sessions run-ticker` as its own process.
raw_env = ["START_SESSION_TICKER=false"]

# Logging
accesslog = "-"  # stdout
errorlog = "-"  # stderr
loglevel = os.getenv("LOG_LEVEL", "info")

# For development with reload
reload = os.getenv("FLASK_ENV") == "development"
