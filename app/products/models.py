import json
import logging
from enum import Enum

from external.database import db
from app.libs.models import BaseModel, StatusMixin
from app.libs.helper import UniqueIdMixin

logger = logging.getLogger(__name__)


class ProductStatus(Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class Product(BaseModel, StatusMixin, UniqueIdMixin):
    __tablename__ = "products"
    id_prefix = "PRD_"

    # Aliased so that StatusMixin and the schemas share one enum
    Status = ProductStatus

    id = db.Column(
        db.String(12), primary_key=True, default=None
    )  # Will be auto-generated
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False)
    detail = db.Column(db.Text)  # Markdown body of the detail page
    website_url = db.Column(db.String(500), default="", nullable=False)
    github_url = db.Column(db.String(500))
    image_url = db.Column(db.String(500))  # Cover, always images[0]
    images = db.Column(db.Text)  # JSON list of image URLs, in display order

    user_id = db.Column(
        db.String(12), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # Denormalized counters, only ever changed together with the join rows
    likes = db.Column(db.Integer, default=0, nullable=False)
    favorites = db.Column(db.Integer, default=0, nullable=False)

    # Relationships
    user = db.relationship("User", back_populates="products")
    categories = db.relationship(
        "Category",
        secondary="product_categories",
        back_populates="products",
        order_by="Category.order",
    )

    __table_args__ = (
        db.Index("idx_products_feed", "status", "likes", "id"),
        db.Index("idx_products_user_created", "user_id", "created_at"),
    )

    @property
    def image_list(self):
        """Stored image URLs, cover first"""
        if self.images:
            try:
                parsed = json.loads(self.images)
            except ValueError:
                logger.error(f"Failed to parse image list of product {self.id}")
                parsed = None
            if isinstance(parsed, list):
                return [url for url in parsed if url]
        return [self.image_url] if self.image_url else []

    def set_images(self, urls):
        urls = [url for url in (urls or []) if url]
        self.image_url = urls[0] if urls else None
        self.images = json.dumps(urls)

    def stored_image_urls(self):
        """Every stored URL, cover included, without duplicates"""
        urls = []
        for url in [self.image_url] + self.image_list:
            if url and url not in urls:
                urls.append(url)
        return urls

    @property
    def is_published(self):
        return self.status == ProductStatus.PUBLISHED

    def __repr__(self):
        return f"<Product {self.name}>"
