# gunicorn.conf.py
import os
import logging
import sys
import multiprocessing

wsgi_app = "app:create_app()"

# Configure logging to stdout
accesslog = '-'
errorlog = '-'
loglevel = 'info'

# Get PORT from environment or use default
port = os.getenv('PORT', '8080')
bind = f"0.0.0.0:{port}"

# The API key store lives in process memory and owns its file, so one
# worker process; requests run concurrently on its threads instead.
workers = 1
threads = min(multiprocessing.cpu_count() * 2 + 1, 8)

# Log configuration on startup
def on_starting(server):
    logger = logging.getLogger('gunicorn.error')
    logger.setLevel(logging.INFO)
    logger.addHandler(logging.StreamHandler(sys.stdout))
    logger.info(f"Starting gunicorn with {workers} workers x {threads} threads on port {port}")

timeout = 120
keepalive = 5
worker_class = "gthread"

# Process naming
proc_name = "bible_api"
default_proc_name = "bible_api"

# Graceful server restart
graceful_timeout = 30
