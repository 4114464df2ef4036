from enum import Enum

from external.database import db
from app.libs.models import BaseModel


class CategoryType(Enum):
    SYSTEM = "system"  # Synthetic feeds such as "recommended" and "new"
    NORMAL = "normal"  # User-selectable when publishing a product


class Category(BaseModel):
    """
    Product category.

    System categories never hold products; their slug selects a synthetic feed.
    Normal categories are attached to products through ``product_categories``.
    Categories are seeded by the ``populate-categories`` command and are not
    edited at runtime.
    """

    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)
    slug = db.Column(db.String(60), unique=True, nullable=False)
    icon = db.Column(db.String(50))
    type = db.Column(
        db.Enum(CategoryType, name="categories_type"),
        default=CategoryType.NORMAL,
        nullable=False,
    )
    order = db.Column(db.Integer, default=0, nullable=False)

    products = db.relationship(
        "Product", secondary="product_categories", back_populates="categories"
    )

    def __repr__(self):
        return f"<Category {self.name}>"


class ProductCategory(db.Model):
    """
    Junction table linking products to categories.
    """

    __tablename__ = "product_categories"

    product_id = db.Column(
        db.String(12),
        db.ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )
    category_id = db.Column(
        db.Integer,
        db.ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
    )
