from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData
import logging

logger = logging.getLogger(__name__)

# Stable constraint names so Alembic autogenerate produces clean diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

db = SQLAlchemy(metadata=MetaData(naming_convention=naming_convention))


def import_models():
    """Import every model module so relationships resolve by name"""
    import app.users.models  # noqa
    import app.categories.models  # noqa
    import app.products.models  # noqa
    import app.socials.models  # noqa
    import app.comments.models  # noqa


def init_db():
    import_models()

    db.create_all()
    logger.info("Database initialized")
