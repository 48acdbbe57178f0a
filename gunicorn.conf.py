"""
Gunicorn configuration for the Store Goals API.

Env vars that override defaults:
  PORT       TCP port to bind
  WORKERS    number of worker processes (default: 2)
  LOG_LEVEL  gunicorn log level (default: info)
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Reports are CPU-light and DB-bound; 2 workers fit a 512 MB container.
workers = int(os.environ.get("WORKERS", "2"))

worker_class = "uvicorn.workers.UvicornWorker"
wsgi_app = "storegoals.main:app"

keepalive = 5
timeout = 60
graceful_timeout = 30

# stdout only; the application logger writes there too.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'
