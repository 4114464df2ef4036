"""Pytest configuration and shared fixtures for the showcase API tests."""

import itertools
import os
import tempfile
from unittest.mock import MagicMock, patch

# Settings are read at import time, so the environment comes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_ALWAYS_EAGER"] = "True"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="showcase-logs-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from flask import g
from flask.testing import FlaskClient

from main.setup import create_app
from external.database import db
from app.libs.security import create_access_token
from app.users.models import User, UserRole
from app.categories.models import Category, CategoryType
from app.products.models import Product, ProductStatus


# =============================================================================
# Application
# =============================================================================


@pytest.fixture
def app():
    """Application over a fresh in-memory database."""
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "CELERY_ALWAYS_EAGER": True,
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


class RequestScopedClient(FlaskClient):
    """
    Test client whose requests each resolve the caller afresh.

    The app context stays pushed for the whole test, so flask-login's cached
    user on ``g`` would otherwise leak from one request into the next.
    """

    def open(self, *args, **kwargs):
        g.pop("_login_user", None)
        return super().open(*args, **kwargs)


@pytest.fixture
def client(app):
    app.test_client_class = RequestScopedClient
    return app.test_client()


@pytest.fixture(autouse=True)
def s3_mock():
    """Object storage double; background deletions run eagerly against it."""
    mock = MagicMock()
    mock.delete_by_url.return_value = True
    mock.upload_image.side_effect = (
        lambda data, filename, folder="products", max_size=1920: f"https://cdn.test/{folder}/{filename}"
    )
    with patch("app.media.tasks.s3_service", mock), patch(
        "app.media.services.s3_service", mock
    ):
        yield mock


@pytest.fixture(autouse=True)
def redis_mock():
    """Dict-backed stand-in for the Redis wrapper."""
    store = {}
    mock = MagicMock()
    mock.get.side_effect = store.get
    mock.set.side_effect = lambda name, value, ex=None: store.__setitem__(name, value)
    mock.delete.side_effect = lambda *names: sum(
        1 for name in names if store.pop(name, None) is not None
    )
    mock.store = store
    with patch("app.categories.services.redis_client", mock):
        yield mock


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make_user(username=None, **kwargs):
        n = next(counter)
        user = User(
            username=username or f"maker{n}",
            email=kwargs.pop("email", f"maker{n}@example.com"),
            **kwargs,
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def make_category(app):
    counter = itertools.count(1)

    def _make_category(name=None, slug=None, type=CategoryType.NORMAL):
        n = next(counter)
        name = name or f"Category {n}"
        category = Category(
            name=name,
            slug=slug or name.lower().replace(" ", "-"),
            type=type,
            order=n,
        )
        db.session.add(category)
        db.session.commit()
        return category

    return _make_category


@pytest.fixture
def make_product(app):
    counter = itertools.count(1)

    def _make_product(user, categories=(), status=ProductStatus.PUBLISHED, **kwargs):
        n = next(counter)
        product = Product(
            name=kwargs.pop("name", f"Product {n}"),
            description=kwargs.pop("description", "A useful thing"),
            user_id=user.id,
            status=status,
            **kwargs,
        )
        product.categories = list(categories)
        db.session.add(product)
        db.session.commit()
        return product

    return _make_product


@pytest.fixture
def auth_headers():
    def _auth_headers(user, role="USER"):
        return {"Authorization": f"Bearer {create_access_token(user.id, role)}"}

    return _auth_headers


@pytest.fixture
def admin(make_user):
    return make_user("admin", role=UserRole.ADMIN)


@pytest.fixture
def column_value(app):
    """Read one column straight from the database, bypassing the identity map."""

    def _column_value(model, column, id_):
        return (
            db.session.query(getattr(model, column)).filter(model.id == id_).scalar()
        )

    return _column_value
