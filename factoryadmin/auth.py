from functools import wraps

from flask_login import login_required

from factoryadmin.permissions import ensure_permission


def permission_required(permission: str):
    """Decorator that lets the view run only for identities holding ``permission``."""

    def decorator(f):
        @wraps(f)
        @login_required
        def wrapped(*args, **kwargs):
            guard_response = ensure_permission(permission)
            if guard_response is not None:
                return guard_response
            return f(*args, **kwargs)

        return wrapped

    return decorator


def blueprint_permission_guard(permission: str):
    """Return a ``before_request`` handler that enforces ``permission``."""

    def handler():
        return ensure_permission(permission)

    return handler
