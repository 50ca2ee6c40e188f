from flask import current_app
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis import Redis
from redis.exceptions import RedisError
from rq import Queue


class RQWrapper:
    """RQ queue with a synchronous fallback.

    Without REDIS_URL (dev machines, tests) jobs run inline in the calling
    request, as they do when Redis is configured but down at enqueue time.
    A job that fails inline is logged and does not fail the request.
    """

    def __init__(self):
        self.redis = None
        self.queue = None

    def init_app(self, app):
        url = app.config.get("REDIS_URL")
        self.redis = Redis.from_url(url) if url else None
        self.queue = Queue("default", connection=self.redis) if self.redis is not None else None

    def _run_inline(self, func, args, kwargs):
        try:
            return func(*args, **kwargs)
        except Exception:
            current_app.logger.exception("Inline execution of %s failed", func.__name__)
            return None

    def enqueue(self, func, *args, **kwargs):
        if self.queue is None:
            return self._run_inline(func, args, kwargs)
        try:
            return self.queue.enqueue(func, *args, **kwargs)
        except RedisError:
            current_app.logger.exception("RQ enqueue failed, running %s inline", func.__name__)
            return self._run_inline(func, args, kwargs)


class SearchEngine:
    """Holds the configured search index client on the app."""

    def init_app(self, app):
        from .services.search_index import MeilisearchIndex

        index = None
        if app.config.get("MEILISEARCH_HOST"):
            index = MeilisearchIndex(
                host=app.config["MEILISEARCH_HOST"],
                api_key=app.config.get("MEILISEARCH_API_KEY"),
                index_name=app.config.get("SEARCH_INDEX_NAME", "employees_public"),
                timeout=app.config.get("SEARCH_TIMEOUT", 10),
            )
        app.extensions["search_index"] = index

    @property
    def index(self):
        return current_app.extensions.get("search_index")


db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
rq = RQWrapper()
search = SearchEngine()
