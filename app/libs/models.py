from sqlalchemy.orm import declared_attr
from external.database import db
from app.libs.datetime_utils import utcnow


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class StatusMixin:
    """Adds a status column that uses an Enum defined in the model class"""

    __abstract__ = True

    @declared_attr
    def status(cls):
        status_enum = cls.Status
        default_value = next(iter(status_enum))  # First enum member
        # Create a unique enum name based on the table name
        enum_name = f"{cls.__tablename__}_status"

        return db.Column(
            db.Enum(status_enum, name=enum_name), default=default_value, nullable=False
        )


class BaseModel(db.Model, TimestampMixin):
    __abstract__ = True


class BaseReaction(db.Model):
    """Join row between a user and the entity they reacted to"""

    __abstract__ = True

    @declared_attr
    def user_id(cls):
        return db.Column(
            db.String(12),
            db.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        )

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    @declared_attr
    def user(cls):
        return db.relationship("User")

    def __repr__(self):
        return f"<{self.__class__.__name__}(user_id={self.user_id})>"
