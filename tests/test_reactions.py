import pytest

from external.database import db
from app.libs.errors import ConflictError, ForbiddenError, NotFoundError
from app.products.models import Product, ProductStatus
from app.comments.models import Comment
from app.socials.models import Like, Favorite
from app.socials.services import ReactionService, ReactionKind


@pytest.fixture
def owner(make_user):
    return make_user("owner")


@pytest.fixture
def fan(make_user):
    return make_user("fan")


@pytest.fixture
def product(owner, make_product):
    return make_product(owner)


def like_rows(product_id):
    return db.session.query(Like).filter_by(product_id=product_id).count()


def test_like_creates_row_and_increments_counter(product, fan, column_value):
    result = ReactionService.add(ReactionKind.LIKE, fan.id, product.id)

    assert result == {"success": True, "count": 1, "active": True}
    assert column_value(Product, "likes", product.id) == 1
    assert like_rows(product.id) == 1


def test_duplicate_like_is_conflict_and_counted_once(product, fan, column_value):
    ReactionService.add(ReactionKind.LIKE, fan.id, product.id)

    with pytest.raises(ConflictError):
        ReactionService.add(ReactionKind.LIKE, fan.id, product.id)

    assert column_value(Product, "likes", product.id) == 1
    assert like_rows(product.id) == 1


def test_duplicate_like_from_a_separate_session_is_rejected_by_the_key(
    product, fan, column_value
):
    product_id, fan_id = product.id, fan.id
    ReactionService.add(ReactionKind.LIKE, fan_id, product_id)

    # A later request starts with an empty identity map, so only the
    # composite primary key can catch the duplicate
    db.session.remove()

    with pytest.raises(ConflictError) as excinfo:
        ReactionService.add(ReactionKind.LIKE, fan_id, product_id)

    assert excinfo.value.status_code == 409
    assert column_value(Product, "likes", product_id) == 1
    assert like_rows(product_id) == 1


def test_unlike_decrements_and_missing_unlike_is_conflict(product, fan, column_value):
    ReactionService.add(ReactionKind.LIKE, fan.id, product.id)

    result = ReactionService.remove(ReactionKind.LIKE, fan.id, product.id)
    assert result["count"] == 0
    assert result["active"] is False

    with pytest.raises(ConflictError):
        ReactionService.remove(ReactionKind.LIKE, fan.id, product.id)
    assert column_value(Product, "likes", product.id) == 0


@pytest.mark.parametrize("kind", [ReactionKind.LIKE, ReactionKind.FAVORITE])
def test_owner_cannot_react_to_own_product(kind, product, owner, column_value):
    with pytest.raises(ForbiddenError):
        ReactionService.add(kind, owner.id, product.id)

    assert column_value(Product, "likes", product.id) == 0
    assert column_value(Product, "favorites", product.id) == 0


def test_reaction_on_missing_product_is_not_found(fan):
    with pytest.raises(NotFoundError):
        ReactionService.add(ReactionKind.FAVORITE, fan.id, "PRD_MISSING")


@pytest.mark.parametrize("kind", [ReactionKind.LIKE, ReactionKind.FAVORITE])
def test_draft_is_not_found_for_anyone_but_its_maker(
    kind, owner, fan, make_product, column_value
):
    draft = make_product(owner, status=ProductStatus.DRAFT)

    with pytest.raises(NotFoundError):
        ReactionService.add(kind, fan.id, draft.id)
    with pytest.raises(NotFoundError):
        ReactionService.status(kind, fan.id, draft.id)
    with pytest.raises(NotFoundError):
        ReactionService.status(kind, None, draft.id)

    # the maker still sees it and is refused for reacting to their own work
    with pytest.raises(ForbiddenError):
        ReactionService.add(kind, owner.id, draft.id)
    assert ReactionService.status(kind, owner.id, draft.id) == {
        "count": 0,
        "active": False,
    }
    assert column_value(Product, "likes", draft.id) == 0
    assert column_value(Product, "favorites", draft.id) == 0


def test_counters_match_rows_after_mixed_toggles(
    product, make_user, column_value
):
    users = [make_user() for _ in range(4)]
    for user in users:
        ReactionService.add(ReactionKind.LIKE, user.id, product.id)
        ReactionService.add(ReactionKind.FAVORITE, user.id, product.id)
    ReactionService.remove(ReactionKind.LIKE, users[0].id, product.id)
    ReactionService.remove(ReactionKind.FAVORITE, users[1].id, product.id)
    ReactionService.remove(ReactionKind.FAVORITE, users[2].id, product.id)
    with pytest.raises(ConflictError):
        ReactionService.add(ReactionKind.LIKE, users[3].id, product.id)

    favorites = db.session.query(Favorite).filter_by(product_id=product.id).count()
    assert column_value(Product, "likes", product.id) == like_rows(product.id) == 3
    assert column_value(Product, "favorites", product.id) == favorites == 2


def test_status_for_anonymous_and_reacting_viewer(product, fan):
    ReactionService.add(ReactionKind.FAVORITE, fan.id, product.id)

    assert ReactionService.status(ReactionKind.FAVORITE, None, product.id) == {
        "count": 1,
        "active": False,
    }
    assert ReactionService.status(ReactionKind.FAVORITE, fan.id, product.id) == {
        "count": 1,
        "active": True,
    }


def test_reacted_ids_is_limited_to_requested_targets(owner, fan, make_product):
    first, second, third = (make_product(owner) for _ in range(3))
    ReactionService.add(ReactionKind.LIKE, fan.id, first.id)
    ReactionService.add(ReactionKind.LIKE, fan.id, third.id)

    assert ReactionService.reacted_ids(
        ReactionKind.LIKE, fan.id, [first.id, second.id]
    ) == {first.id}
    assert ReactionService.reacted_ids(ReactionKind.LIKE, None, [first.id]) == set()


def _comment(product, user, content="hello"):
    comment = Comment(content=content, product_id=product.id, user_id=user.id)
    db.session.add(comment)
    db.session.commit()
    return comment


def test_self_comment_like_is_allowed_by_default(product, owner, column_value):
    comment = _comment(product, owner)

    result = ReactionService.add(ReactionKind.COMMENT_LIKE, owner.id, comment.id)

    assert result["count"] == 1
    assert column_value(Comment, "likes", comment.id) == 1


def test_self_comment_like_can_be_disabled(app, product, owner, fan):
    app.config["ALLOW_SELF_COMMENT_LIKE"] = False
    comment = _comment(product, owner)

    with pytest.raises(ForbiddenError):
        ReactionService.add(ReactionKind.COMMENT_LIKE, owner.id, comment.id)
    assert ReactionService.add(ReactionKind.COMMENT_LIKE, fan.id, comment.id)["count"] == 1


def test_comment_on_a_draft_cannot_be_liked_by_strangers(
    owner, fan, make_product, column_value
):
    draft = make_product(owner, status=ProductStatus.DRAFT)
    comment = _comment(draft, owner)
    comment_id = comment.id

    with pytest.raises(NotFoundError):
        ReactionService.add(ReactionKind.COMMENT_LIKE, fan.id, comment_id)
    assert ReactionService.add(ReactionKind.COMMENT_LIKE, owner.id, comment_id)["count"] == 1
    assert column_value(Comment, "likes", comment_id) == 1
