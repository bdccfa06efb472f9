# Run behind gunicorn with uvicorn workers: env/bin/gunicorn fileapi.api:app -c gunicorn.conf.py

# Workers
workers = 4
worker_class = "uvicorn.workers.UvicornWorker"

# Socket
bind = "localhost:5000"

# Drive calls can be slow, allow for a few sequential round trips per request
timeout = 120

# Logging
# loglevel = 'debug'
# accesslog = '/tmp/fileapi_access_log'
# errorlog =  '/tmp/fileapi_error_log'
