"""Gunicorn configuration for the factory admin console."""
import os

# The REST backend conventionally binds 5000; the console defaults to 8000.
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# Pages spend most of their time waiting on the backend, so a few workers suffice.
workers = int(os.getenv("GUNICORN_WORKERS", "2"))

# Log to stdout/stderr by default so container orchestrators can capture logs.
accesslog = os.getenv("GUNICORN_ACCESS_LOGFILE", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOGFILE", "-")

timeout = int(os.getenv("GUNICORN_TIMEOUT", "30"))

forwarded_allow_ips = os.getenv("GUNICORN_FORWARDED_ALLOW_IPS", "*")
