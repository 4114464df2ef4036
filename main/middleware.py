from functools import wraps
import logging

from flask_login import current_user

from app.libs.errors import AuthError, ForbiddenError

logger = logging.getLogger(__name__)


class AuthMiddleware:
    def __init__(self, app):
        self.app = app

    def __call__(self, environ, start_response):
        logger.info(
            f"Incoming request: {environ['REQUEST_METHOD']} {environ['PATH_INFO']}"
        )
        return self.app(environ, start_response)


def role_required(role):
    """Allow the view only for users whose ``is_<role>`` flag is set"""

    def decorator(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                raise AuthError()
            if not getattr(current_user, f"is_{role}", False):
                raise ForbiddenError(f"{role} role required")
            return f(*args, **kwargs)

        return wrapped

    return decorator
