from __future__ import annotations

from flask import Blueprint, current_app, render_template, request
from werkzeug.exceptions import HTTPException

from factoryadmin.permissions import access_denied_response

bp = Blueprint("errors", __name__)


@bp.app_errorhandler(403)
def forbidden(error):
    return access_denied_response(getattr(error, "description", "") or "")


@bp.app_errorhandler(404)
def not_found(error):
    return render_template("errors/not_found.html", path=request.path), 404


@bp.app_errorhandler(Exception)
def handle_exception(error: Exception):
    # HTTP errors other than 500 keep their default handling.
    if isinstance(error, HTTPException) and error.code != 500:
        return error

    current_app.logger.exception("Unhandled exception", exc_info=error)
    return (
        render_template(
            "errors/server_error.html",
            endpoint=request.endpoint,
            path=request.path,
        ),
        500,
    )
