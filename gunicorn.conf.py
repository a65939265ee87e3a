"""
Gunicorn Configuration

Runs the Seller Dashboard API with Uvicorn workers:
    gunicorn seller_dashboard.main:app -c gunicorn.conf.py
"""

import multiprocessing
import os

bind = os.getenv("BIND", f"0.0.0.0:{os.getenv('API_PORT', '8000')}")
backlog = 2048

workers = int(os.getenv("WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 10000
max_requests_jitter = 1000

# Dashboard fetches time out well before this (REPORTING_FETCH_TIMEOUT_SECONDS)
timeout = 60
graceful_timeout = 30
keepalive = 5

proc_name = "seller-dashboard-api"

# Application logs are structured JSON on stdout; gunicorn's own go to stderr
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
accesslog = None


def post_fork(server, worker):
    """Workers configure logging in the application lifespan."""
    server.log.info("Worker spawned (pid: %s)", worker.pid)
