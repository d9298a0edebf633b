"""
Gunicorn configuration for the ProApoio API
Run with: gunicorn -c gunicorn.conf.py proapoio.main:app
"""
import multiprocessing
import os

# Server socket
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# Worker processes
# Handlers are async and stateless; one uvicorn worker per core is enough
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count()))
worker_class = "uvicorn.workers.UvicornWorker"

# Worker lifecycle
max_requests = 1000
max_requests_jitter = 100

# Timeouts
timeout = 30
keepalive = 5
graceful_timeout = 30

# Process naming
proc_name = "proapoio_api"

# Logging (application logs go through structlog on stdout)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("ProApoio API ready, spawning %s workers", workers)


def worker_abort(worker):
    """Called when a worker times out."""
    worker.log.warning("Worker %s aborted", worker.pid)
