import json
import logging
from enum import Enum
from flask_login import UserMixin

from app.libs.models import BaseModel, StatusMixin
from app.libs.helper import UniqueIdMixin
from external.database import db

logger = logging.getLogger(__name__)


class UserRole(Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(BaseModel, StatusMixin, UserMixin, UniqueIdMixin):
    __tablename__ = "users"
    id_prefix = "USR_"

    class Status(Enum):
        ACTIVE = "ACTIVE"
        BANNED = "BANNED"

    id = db.Column(db.String(12), primary_key=True, default=None)
    username = db.Column(db.String(50), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True)
    password_hash = db.Column(db.String(255))
    avatar = db.Column(db.String(500))
    bio = db.Column(db.Text)
    title = db.Column(db.String(100))
    contact = db.Column(db.Text)  # JSON list of contact lines
    role = db.Column(
        db.Enum(UserRole, name="users_role"), default=UserRole.USER, nullable=False
    )

    # Relationships
    products = db.relationship("Product", back_populates="user", lazy="dynamic")
    comments = db.relationship("Comment", back_populates="user", lazy="dynamic")

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    @property
    def is_active(self):
        # flask-login treats inactive users as anonymous
        return self.status == User.Status.ACTIVE

    @property
    def contact_lines(self):
        if not self.contact:
            return []
        try:
            lines = json.loads(self.contact)
        except ValueError:
            logger.warning(f"Unreadable contact field for user {self.id}")
            return []
        return lines if isinstance(lines, list) else []

    @contact_lines.setter
    def contact_lines(self, lines):
        self.contact = json.dumps(list(lines or []))

    def __repr__(self):
        return f"<User {self.username}>"
