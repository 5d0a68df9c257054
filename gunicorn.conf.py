# gunicorn.conf.py
import multiprocessing, os

wsgi_app = "panchang.main:app"
bind = f"0.0.0.0:{os.getenv('PORT','5000')}"
# transition searches and the moon scan are pure-Python CPU work
workers = int(os.getenv("PANCHANG_WORKERS", max(2, multiprocessing.cpu_count())))
threads = 1
worker_class = "sync"
timeout = 60
graceful_timeout = 30
keepalive = 2
accesslog = "-"   # stdout
errorlog = "-"    # stderr
loglevel = os.getenv("LOG_LEVEL", "info").lower()

access_log_format = (
    '%(h)s - "%(r)s" %(s)s %(b)s '
    'req_id:%({X-Request-ID}i)s rt:%(L)s'
)
