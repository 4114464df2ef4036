from importlib import import_module
import logging
from main.config import settings

logger = logging.getLogger(__name__)

BLUEPRINT_MODULES = ["users", "categories", "products", "comments", "media"]


def register_blueprints(app, api):
    """Register the blueprint of every feature package with the API"""
    for module in BLUEPRINT_MODULES:
        mod = import_module(f"app.{module}.routes")
        api.register_blueprint(mod.bp)
        logger.debug(f"Registered blueprint for {module}")


def create_root_routes(app):
    @app.route("/status")
    def status():
        return {"status": "running", "environment": settings.ENV}
