"""
Gunicorn configuration for the Pledgeline compute API.

Env vars that override defaults:
  PORT     TCP port to bind
  WORKERS  number of worker processes (default: 2)
"""
import os

wsgi_app = "pledgeline.main:app"

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "2"))

worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# Requests are CPU-only and short.
timeout = 30

loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30
