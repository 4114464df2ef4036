from celery import Celery
from main.config import settings
from flask import Flask


def create_celery_app(app: Flask = None) -> Celery:
    celery = Celery(app.import_name if app else __name__, **settings.CELERY_CONFIG)

    if app:

        class ContextTask(celery.Task):
            def __call__(self, *args, **kwargs):
                with app.app_context():
                    return self.run(*args, **kwargs)

        celery.Task = ContextTask
        celery.flask_app = app
        celery.conf.update(
            task_always_eager=app.config.get(
                "CELERY_ALWAYS_EAGER", settings.CELERY_ALWAYS_EAGER
            )
        )
        app.extensions["celery"] = celery

    celery.autodiscover_tasks(["app.media"])

    celery.conf.task_routes = {
        "app.media.tasks.*": {"queue": "media"},
    }

    # shared_task definitions bind to the most recently created app
    celery.set_default()
    return celery
