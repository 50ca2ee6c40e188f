import logging
import time

from flask import Flask, jsonify

from .errors import register_error_handlers
from .extensions import db, login_manager, migrate, rq, search


def create_app(config_object="config.Config"):
    """App factory.

    JSON API blueprints live under /api (auth under /auth); the public SEO
    pages (robots.txt, sitemap.xml, /workers/<slug>) are served from the root.
    """
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.setdefault("STARTED_AT", time.time())
    app.logger.setLevel(app.config.get("LOG_LEVEL", logging.INFO))

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    rq.init_app(app)
    search.init_app(app)

    from . import models  # noqa: F401  register every mapper before first query

    @login_manager.user_loader
    def load_user(user_id):
        from .models.user import User
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Unauthorized"}), 401

    from .blueprints.auth import bp as auth_bp
    from .blueprints.employee_profile import bp as employee_profile_bp
    from .blueprints.employer_profile import bp as employer_profile_bp
    from .blueprints.saved_searches import bp as saved_searches_bp
    from .blueprints.chat import bp as chat_bp
    from .blueprints.interviews import bp as interviews_bp
    from .blueprints.search import bp as search_bp
    from .blueprints.upload import bp as upload_bp
    from .blueprints.webhooks import bp as webhooks_bp
    from .blueprints.system import bp as system_bp
    from .blueprints.public import bp as public_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(employee_profile_bp, url_prefix="/api/employee-profile")
    app.register_blueprint(employer_profile_bp, url_prefix="/api/employer-profile")
    app.register_blueprint(saved_searches_bp, url_prefix="/api/saved-searches")
    app.register_blueprint(chat_bp, url_prefix="/api/chat")
    app.register_blueprint(interviews_bp, url_prefix="/api/interviews")
    app.register_blueprint(search_bp, url_prefix="/api/search")
    app.register_blueprint(upload_bp, url_prefix="/api/upload")
    app.register_blueprint(webhooks_bp, url_prefix="/api/webhooks")
    app.register_blueprint(system_bp, url_prefix="/api")
    app.register_blueprint(public_bp)

    register_error_handlers(app)

    return app
