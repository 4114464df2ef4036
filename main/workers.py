from main.setup import create_app


# Flask app and Celery share configuration and app context
flask_app = create_app()
celery_app = flask_app.extensions["celery"]


if __name__ == "__main__":
    celery_app.start()
