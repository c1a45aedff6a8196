# Run with: gunicorn -c gunicorn.conf.py "authgate:create_app()"
import os

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
# More than one worker needs REDIS_URL: the in-process store is per worker
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "1"))
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# ProxyFix in the app handles X-Forwarded-*; trust the proxy here too
forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "*")
proxy_protocol = False
