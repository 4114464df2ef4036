import logging

from flask_login import LoginManager
from flask_migrate import Migrate

from app.libs.errors import AuthError
from app.libs.security import decode_access_token, token_from_request

logger = logging.getLogger(__name__)

login_manager = LoginManager()
migrate = Migrate()


def _active_user(user_id):
    from external.database import db
    from app.users.models import User

    user = db.session.get(User, str(user_id))
    if user is None or not user.is_active:
        return None
    return user


@login_manager.user_loader
def load_user(user_id):
    return _active_user(user_id)


@login_manager.request_loader
def load_user_from_request(request):
    """Resolve the caller from a bearer token or the ``token`` cookie"""
    token = token_from_request(request)
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None:
        logger.info("Rejected invalid or expired access token")
        return None
    return _active_user(payload["sub"])


@login_manager.unauthorized_handler
def unauthorized():
    raise AuthError("Authentication required")
