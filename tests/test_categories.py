import json

from external.database import db
from app.categories.models import Category, CategoryType
from app.categories.services import CATEGORY_CACHE_KEY, CategoryService


def test_listed_in_display_order(client, make_category):
    make_category("AI", type=CategoryType.NORMAL).order = 20
    make_category("New", type=CategoryType.SYSTEM).order = 1
    db.session.commit()

    response = client.get("/categories")

    assert response.status_code == 200
    assert [(c["slug"], c["type"]) for c in response.get_json()] == [
        ("new", "system"),
        ("ai", "normal"),
    ]


def test_listing_fills_and_then_uses_the_cache(app, make_category, redis_mock):
    make_category("Design")

    first = CategoryService.list_categories()
    assert json.loads(redis_mock.store[CATEGORY_CACHE_KEY]) == first

    redis_mock.store[CATEGORY_CACHE_KEY] = json.dumps([{"slug": "cached"}])
    assert CategoryService.list_categories() == [{"slug": "cached"}]


def test_unreadable_cache_falls_back_to_database(app, make_category, redis_mock):
    make_category("Design")
    redis_mock.store[CATEGORY_CACHE_KEY] = "{not json"

    assert [c["slug"] for c in CategoryService.list_categories()] == ["design"]


def test_populate_command_seeds_once(app, redis_mock):
    redis_mock.store[CATEGORY_CACHE_KEY] = "[]"
    runner = app.test_cli_runner()

    first = runner.invoke(args=["populate-categories"])
    second = runner.invoke(args=["populate-categories"])

    assert first.exit_code == 0
    assert "Created 7 categories." in first.output
    assert "Created 0 categories." in second.output
    assert CATEGORY_CACHE_KEY not in redis_mock.store

    system = {
        c.slug for c in db.session.query(Category).filter_by(type=CategoryType.SYSTEM)
    }
    assert system == {"recommended", "new"}


def test_populate_command_force_reseeds(app, make_category):
    make_category("Legacy")
    runner = app.test_cli_runner()

    result = runner.invoke(args=["populate-categories", "--force"])

    assert result.exit_code == 0
    assert db.session.query(Category).filter_by(slug="legacy").first() is None
    assert db.session.query(Category).count() == 7


def test_list_command(app):
    runner = app.test_cli_runner()
    assert "No categories found" in runner.invoke(args=["list-categories"]).output

    runner.invoke(args=["populate-categories"])
    output = runner.invoke(args=["list-categories"]).output

    assert output.index("recommended") < output.index("devtools")
