"""Manual search reindex.

Usage:
  python scripts/reindex.py              # full rebuild
  python scripts/reindex.py incremental  # profiles updated in the last 24h
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from helpermatch import create_app
from helpermatch.jobs.search import REINDEX_KINDS, reindex_job

kind = sys.argv[1] if len(sys.argv) > 1 else "full"
if kind not in REINDEX_KINDS:
    sys.exit(f"type must be one of: {', '.join(REINDEX_KINDS)}")

app = create_app()
with app.app_context():
    print(reindex_job(kind))
