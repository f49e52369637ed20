from __future__ import annotations

import logging

from flask import Flask, current_app, has_request_context, jsonify, url_for
from werkzeug.routing import BuildError

from config import Config

from .extensions import api, login_manager
from .permissions import visible_pages
from .routes import (
    auth,
    barcodes,
    catalog,
    categories,
    dashboard,
    errors,
    products,
    reports,
    roles,
    stock,
    users,
)
from .services.api_client import ApiError
from .session import current_token, get_session_manager, has_permission
from .utils.logging import configure_logging

logger = logging.getLogger(__name__)


def _handle_unauthorized(error: ApiError) -> None:
    """Called by the API client whenever the backend answers 401."""

    logger.warning("Backend rejected the session token: %s", error.message)
    if not has_request_context():
        return
    if current_app.config.get("LOGOUT_ON_UNAUTHORIZED"):
        get_session_manager().logout()


def create_app(config_override=None):
    app = Flask(__name__)

    app.config.from_object(Config)
    if config_override:
        app.config.update(config_override)

    configure_logging(app)

    api.init_app(app, token_provider=current_token, on_unauthorized=_handle_unauthorized)

    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message = "Please sign in to continue."
    login_manager.login_message_category = "warning"

    @login_manager.user_loader
    def load_user(user_id: str):
        identity = get_session_manager().current
        if identity is None or identity.get_id() != user_id:
            return None
        return identity

    @app.context_processor
    def inject_permission_helpers():
        def navigation_links():
            links: list[dict[str, str]] = []
            for page in visible_pages():
                try:
                    href = url_for(page.endpoint)
                except BuildError:
                    continue
                links.append({"endpoint": page.endpoint, "label": page.label, "href": href})
            return links

        return {
            "has_permission": has_permission,
            "navigation_links": navigation_links,
            "app_version": current_app.config.get("APP_VERSION"),
        }

    # register blueprints
    app.register_blueprint(auth.bp)
    app.register_blueprint(dashboard.bp)
    app.register_blueprint(catalog.bp)
    app.register_blueprint(categories.bp)
    app.register_blueprint(products.bp)
    app.register_blueprint(stock.bp)
    app.register_blueprint(barcodes.bp)
    app.register_blueprint(reports.bp)
    app.register_blueprint(users.bp)
    app.register_blueprint(roles.bp)
    app.register_blueprint(errors.bp)

    @app.route("/healthz")
    def healthz():
        return jsonify(
            status="ok",
            version=app.config.get("APP_VERSION"),
            backend=app.config.get("API_BASE_URL"),
        )

    return app
