# python imports
import logging

# package imports
from flask import Flask
from flask_cors import CORS
from flask_smorest import Api

# app imports
from main.config import settings
from main.logger import setup_logging
from main.errors import register_error_handlers
from main.middleware import AuthMiddleware
from main.routes import register_blueprints, create_root_routes
from main.tasks import create_celery_app

logger = logging.getLogger(__name__)


def configure_app(app, test_config=None):
    """Configure Flask application"""
    app.config.from_object(settings)
    if test_config:
        app.config.update(test_config)

    from external.database import db, import_models
    from main.extensions import login_manager, migrate

    import_models()
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    CORS(app, supports_credentials=True, origins=["*"])

    api = Api(app)

    register_error_handlers(app)

    return api


def register_commands(app):
    """Flask CLI commands: flask <name>"""
    import click
    from flask.cli import with_appcontext

    from external.database import init_db
    from app.categories.management.commands.populate_categories import (
        populate_categories,
    )
    from app.categories.management.commands.list_categories import list_categories
    from app.users.management.commands.make_admin import make_admin

    @click.command("init-db")
    @with_appcontext
    def init_db_command():
        """Create every table that does not exist yet."""
        init_db()
        click.echo("Database initialized.")

    for command in (populate_categories, list_categories, make_admin, init_db_command):
        app.cli.add_command(command)


def create_app(test_config=None):
    """Application factory"""
    setup_logging()

    app = Flask(__name__)
    app.wsgi_app = AuthMiddleware(app.wsgi_app)

    api = configure_app(app, test_config)
    create_celery_app(app)

    with app.app_context():
        register_blueprints(app, api)
        create_root_routes(app)

    register_commands(app)

    logger.info("Application initialized")
    return app
