# gunicorn.conf.py
# Request handlers are stateless, so workers scale freely; the only slow call
# is the SMTP hand-off, which bounds the worker timeout.
import multiprocessing, os

bind = os.getenv("BIND", "unix:/run/regportal/regportal.sock")
wsgi_app = "wsgi:app"

workers = int(os.getenv("WEB_CONCURRENCY", max(2, multiprocessing.cpu_count() + 1)))
worker_class = "gthread"
threads = int(os.getenv("GUNICORN_THREADS", "4"))

_smtp_timeout = int(float(os.getenv("SMTP_TIMEOUT", "30")))
timeout = _smtp_timeout + 15
graceful_timeout = timeout

accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
