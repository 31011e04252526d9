# gunicorn.conf.py
# Run: gunicorn -c gunicorn.conf.py jyotish.main:app
import multiprocessing, os

bind = f"0.0.0.0:{os.getenv('PORT','5000')}"
# Each worker has its own ChartStore; charts are only retrievable from the
# worker that generated them unless WEB_CONCURRENCY=1.
workers = int(os.getenv("WEB_CONCURRENCY", max(2, multiprocessing.cpu_count())))
threads = int(os.getenv("GUNICORN_THREADS", "4"))
worker_class = "gthread"
timeout = 30
graceful_timeout = 30
keepalive = 2
accesslog = "-"   # stdout
errorlog = "-"    # stderr
loglevel = os.getenv("LOGLEVEL", "info")

# add request id if present
access_log_format = (
    '%(h)s - "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" '
    'req_id:%({X-Request-ID}i)s rt:%(L)s'
)
