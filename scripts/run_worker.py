"""Run an RQ worker inside the Flask app context.

Usage:
  source .venv/bin/activate
  export REDIS_URL=redis://localhost:6379/0
  python scripts/run_worker.py

Jobs use `current_app`, the search extension and the Flask-SQLAlchemy
session, so the worker process builds the app and stays in its context.
"""

import sys
import os

# Ensure project root is on sys.path when running from scripts/ or other cwd
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
  sys.path.insert(0, ROOT)

from helpermatch import create_app
import redis
from rq import Worker, Queue


def main():
  app = create_app()
  redis_url = app.config.get('REDIS_URL')
  if not redis_url:
    sys.exit('REDIS_URL is not set; jobs run inline and no worker is needed')
  conn = redis.from_url(redis_url)
  with app.app_context():
    q = Queue('default', connection=conn)
    worker = Worker([q], connection=conn)
    print('RQ worker starting (pid', os.getpid(), ')')
    try:
      worker.work(burst=False, with_scheduler=True, logging_level='INFO')
    finally:
      print('RQ worker exiting (pid', os.getpid(), ')')


if __name__ == '__main__':
  main()
