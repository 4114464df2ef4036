import pytest

from external.database import db
from app.libs.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from app.categories.models import CategoryType, ProductCategory
from app.comments.models import Comment, CommentLike
from app.comments.services import CommentService
from app.products.models import Product, ProductStatus
from app.products.services import ProductService
from app.socials.models import Like, Favorite
from app.socials.services import ReactionService, ReactionKind


@pytest.fixture
def maker(make_user):
    return make_user("maker")


@pytest.fixture
def categories(make_category):
    return [make_category(name) for name in ("DevTools", "Design", "AI", "Marketing")]


def payload(category_ids, **overrides):
    data = {
        "name": "Launchpad",
        "description": "Ship faster",
        "category_ids": category_ids,
    }
    data.update(overrides)
    return data


class TestCreate:
    def test_defaults_to_draft_with_cover_first(self, maker, categories):
        created = ProductService.create_product(
            payload(
                [categories[0].id],
                images=["https://cdn.test/a.jpg", "https://cdn.test/b.jpg"],
            ),
            maker.id,
        )

        assert created["status"] == ProductStatus.DRAFT
        assert created["id"].startswith("PRD_")
        assert created["image_url"] == "https://cdn.test/a.jpg"
        assert created["images"] == ["https://cdn.test/a.jpg", "https://cdn.test/b.jpg"]
        assert [c["slug"] for c in created["categories"]] == ["devtools"]
        assert (created["likes"], created["favorites"]) == (0, 0)

    @pytest.mark.parametrize("count", [0, 4])
    def test_category_count_out_of_range(self, maker, categories, count):
        with pytest.raises(BadRequestError):
            ProductService.create_product(
                payload([c.id for c in categories[:count]]), maker.id
            )

    def test_unknown_category(self, maker, categories):
        with pytest.raises(BadRequestError):
            ProductService.create_product(payload([9999]), maker.id)

    def test_system_category_cannot_be_chosen(self, maker, make_category):
        system = make_category("Recommended", type=CategoryType.SYSTEM)

        with pytest.raises(BadRequestError):
            ProductService.create_product(payload([system.id]), maker.id)
        assert db.session.query(Product).count() == 0


class TestVisibility:
    def test_draft_hidden_from_everyone_but_owner(self, maker, make_user, make_product):
        draft = make_product(maker, status=ProductStatus.DRAFT)
        stranger = make_user("stranger")

        assert ProductService.get_product(draft.id, maker.id)["detail"] is None
        with pytest.raises(NotFoundError):
            ProductService.get_product(draft.id, stranger.id)
        with pytest.raises(NotFoundError):
            ProductService.get_product(draft.id)

    def test_viewer_flags(self, maker, make_user, make_product):
        product = make_product(maker)
        fan = make_user("fan")
        ReactionService.add(ReactionKind.FAVORITE, fan.id, product.id)

        item = ProductService.get_product(product.id, fan.id)

        assert item["has_favorited"] is True
        assert item["has_liked"] is False
        assert item["favorites"] == 1


class TestUpdate:
    def test_only_owner_may_update(self, maker, make_user, make_product):
        product = make_product(maker)
        other = make_user("other")

        with pytest.raises(ForbiddenError):
            ProductService.update_product(product.id, other.id, {"name": "Mine now"})

    def test_missing_product(self, maker):
        with pytest.raises(NotFoundError):
            ProductService.update_product("PRD_MISSING", maker.id, {"name": "x"})

    def test_duplicate_name_for_same_owner(self, maker, make_product):
        make_product(maker, name="Taken")
        product = make_product(maker, name="Free")

        with pytest.raises(ConflictError):
            ProductService.update_product(product.id, maker.id, {"name": "Taken"})

    def test_partial_update_keeps_other_fields(self, maker, make_product, categories):
        product = make_product(maker, categories=[categories[0]], website_url="https://a.io")

        updated = ProductService.update_product(
            product.id,
            maker.id,
            {"description": "Sharper", "category_ids": [categories[1].id, categories[2].id]},
        )

        assert updated["description"] == "Sharper"
        assert updated["website_url"] == "https://a.io"
        assert {c["slug"] for c in updated["categories"]} == {"design", "ai"}

    def test_dropped_images_are_deleted_from_storage(self, maker, make_product, s3_mock):
        product = make_product(maker)
        product.set_images(["https://cdn.test/a.jpg", "https://cdn.test/b.jpg"])
        db.session.commit()

        updated = ProductService.update_product(
            product.id,
            maker.id,
            {"images": ["https://cdn.test/b.jpg", "https://cdn.test/c.jpg"]},
        )

        assert updated["image_url"] == "https://cdn.test/b.jpg"
        s3_mock.delete_by_url.assert_called_once_with("https://cdn.test/a.jpg")

    def test_unchanged_images_touch_nothing(self, maker, make_product, s3_mock):
        product = make_product(maker)
        product.set_images(["https://cdn.test/a.jpg"])
        db.session.commit()

        ProductService.update_product(product.id, maker.id, {"name": "Renamed"})

        s3_mock.delete_by_url.assert_not_called()


class TestDelete:
    def test_removes_dependent_rows_and_images(
        self, maker, make_user, make_product, categories, s3_mock
    ):
        product = make_product(maker, categories=[categories[0]])
        product.set_images(["https://cdn.test/a.jpg", "https://cdn.test/b.jpg"])
        db.session.commit()
        survivor = make_product(maker, categories=[categories[0]])

        fan = make_user("fan")
        ReactionService.add(ReactionKind.LIKE, fan.id, product.id)
        ReactionService.add(ReactionKind.FAVORITE, fan.id, product.id)
        ReactionService.add(ReactionKind.LIKE, fan.id, survivor.id)
        comment = CommentService.post_comment(product.id, fan.id, "Nice")
        CommentService.post_comment(product.id, maker.id, "Thanks", parent_id=comment["id"])
        ReactionService.add(ReactionKind.COMMENT_LIKE, maker.id, comment["id"])

        product_id = product.id
        assert ProductService.delete_product(product_id, maker.id) is True

        assert db.session.get(Product, product_id) is None
        assert db.session.query(Comment).count() == 0
        assert db.session.query(CommentLike).count() == 0
        assert db.session.query(Favorite).count() == 0
        assert [like.product_id for like in db.session.query(Like)] == [survivor.id]
        assert [
            row.product_id for row in db.session.query(ProductCategory)
        ] == [survivor.id]

        deleted = sorted(call.args[0] for call in s3_mock.delete_by_url.call_args_list)
        assert deleted == ["https://cdn.test/a.jpg", "https://cdn.test/b.jpg"]

    def test_only_owner_may_delete(self, maker, make_user, make_product):
        product = make_product(maker)

        with pytest.raises(ForbiddenError):
            ProductService.delete_product(product.id, make_user("other").id)
        assert db.session.get(Product, product.id) is not None
