# gunicorn.conf.py
# gunicorn -c gunicorn.conf.py campus_site.wsgi:application
import os

# Worker configuration
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "sync"
timeout = int(os.getenv("GUNICORN_TIMEOUT", 30))
graceful_timeout = 10
keepalive = 2
max_requests = 1000
max_requests_jitter = 50

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")

# Process naming
proc_name = "campus-api"

# Bind address
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# Behind a proxy
forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1")
