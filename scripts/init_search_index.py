"""Create the search index and push its settings (searchable, filterable and
sortable attributes, synonyms, typo tolerance).

Safe to re-run; settings are replaced wholesale.

Usage:
  python scripts/init_search_index.py
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from helpermatch import create_app
from helpermatch.extensions import search
from helpermatch.services.search_index import SearchIndexError

app = create_app()
with app.app_context():
    index = search.index
    if index is None:
        sys.exit("MEILISEARCH_HOST is not set")
    try:
        task = index.configure()
    except SearchIndexError as e:
        sys.exit(f"Could not configure index: {e}")
    print("Index", app.config["SEARCH_INDEX_NAME"], "configured:", task)
