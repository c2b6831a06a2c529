"""
Gunicorn configuration for the telesales gamification API.

    gunicorn -c gunicorn.conf.py

Env vars read here:
  PORT       port to bind (default 8000)
  WORKERS    worker processes (default 2)
Everything else (LOG_LEVEL, STREAK_TIMEZONE, DATABASE_URL) comes from
telesales.core.config so the server and the app agree on it.
"""
import os

from telesales.core.config import settings

wsgi_app = "telesales.main:app"
proc_name = "telesales-gamification"

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"
workers = int(os.environ.get("WORKERS", "2"))
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5
timeout = 120
graceful_timeout = 30

loglevel = settings.LOG_LEVEL.lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'


def on_starting(server):
    # fails here, in the master, on an unknown STREAK_TIMEZONE
    tz = settings.streak_tz
    server.log.info("Streak calendar days use %s", tz.key)


def when_ready(server):
    server.log.info("%s ready on %s with %s worker(s)", proc_name, bind, workers)
