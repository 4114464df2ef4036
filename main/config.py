from decouple import AutoConfig
from pathlib import Path

config = AutoConfig()


class Config:
    def __init__(self):
        # Environment
        self.ENV = config("ENV", default="development")

        # Database
        self.DATABASE_URL = config("DATABASE_URL", default="")
        self.DB_HOST = config("DB_HOST", default="localhost")
        self.DB_PORT = config("DB_PORT", default=5432, cast=int)
        self.DB_USER = config("DB_USER", default="showcase")
        self.DB_PASSWORD = config("DB_PASSWORD", default="showcase123")
        self.DB_NAME = config("DB_NAME", default="showcase_db")
        self.SQLALCHEMY_TRACK_MODIFICATIONS = False

        # Redis
        self.REDIS_HOST = config("REDIS_HOST", default="localhost")
        self.REDIS_PORT = config("REDIS_PORT", default=6379, cast=int)

        # Auth
        self.SECRET_KEY = config("SECRET_KEY", default="dev-secret-key")
        self.SESSION_COOKIE_NAME = "showcase_session"
        self.JWT_SECRET = config("JWT_SECRET", default="dev-jwt-secret")
        self.JWT_ALG = config("JWT_ALG", default="HS256")
        self.JWT_EXPIRE_DAYS = config("JWT_EXPIRE_DAYS", default=7, cast=int)

        # Object storage
        self.AWS_ACCESS_KEY = config("AWS_ACCESS_KEY", default="")
        self.AWS_SECRET_KEY = config("AWS_SECRET_KEY", default="")
        self.AWS_REGION = config("AWS_REGION", default="us-east-1")
        self.AWS_S3_BUCKET = config("AWS_S3_BUCKET", default="showcase-media")
        self.CDN_DOMAIN = config("CDN_DOMAIN", default="")

        # App
        self.BIND = config("BIND", default="127.0.0.1:8000")
        self.DEBUG = config("DEBUG", default=True, cast=bool)

        # API docs (flask-smorest)
        self.API_TITLE = "Showcase API"
        self.API_VERSION = "v1"
        self.OPENAPI_VERSION = "3.0.3"

        # Logging
        self.LOG_DIR = Path(config("LOG_DIR", default="logs"))
        self.LOG_LEVEL = config("LOG_LEVEL", default="INFO")

        # Background jobs
        self.CELERY_ALWAYS_EAGER = config("CELERY_ALWAYS_EAGER", default=False, cast=bool)

        # Feed
        self.FEED_DEFAULT_LIMIT = config("FEED_DEFAULT_LIMIT", default=10, cast=int)
        self.FEED_MAX_LIMIT = config("FEED_MAX_LIMIT", default=50, cast=int)
        self.FEED_NEW_WINDOW_DAYS = config("FEED_NEW_WINDOW_DAYS", default=15, cast=int)

        # Comments and reactions
        self.COMMENT_MAX_LENGTH = config("COMMENT_MAX_LENGTH", default=2000, cast=int)
        self.COMMENT_HIDE_REPLY_TO_VIEWER = config(
            "COMMENT_HIDE_REPLY_TO_VIEWER", default=True, cast=bool
        )
        self.COMMENT_HIDE_REPLY_TO_ROOT = config(
            "COMMENT_HIDE_REPLY_TO_ROOT", default=False, cast=bool
        )
        self.ALLOW_SELF_COMMENT_LIKE = config(
            "ALLOW_SELF_COMMENT_LIKE", default=True, cast=bool
        )

        # Caching
        self.CATEGORY_CACHE_TTL = config("CATEGORY_CACHE_TTL", default=600, cast=int)

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def CELERY_CONFIG(self):
        redis_url = f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/0"
        return {
            "broker_url": redis_url,
            "result_backend": redis_url,
            "task_always_eager": self.CELERY_ALWAYS_EAGER,
            "task_ignore_result": True,
        }


settings = Config()
