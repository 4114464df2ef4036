import click
from flask.cli import with_appcontext
from external.database import db
from app.categories.models import Category, CategoryType, ProductCategory
from app.categories.management.data import SYSTEM_CATEGORIES, NORMAL_CATEGORIES
from app.categories.services import CategoryService


@click.command("populate-categories")
@click.option(
    "--force",
    is_flag=True,
    help="Delete existing categories (and their product links) before seeding",
)
@with_appcontext
def populate_categories(force):
    """Seed the system and normal categories. Existing slugs are left alone."""

    if force:
        click.echo("Deleting existing categories...")
        ProductCategory.query.delete()
        Category.query.delete()
        db.session.commit()

    created = 0
    for category_type, entries in (
        (CategoryType.SYSTEM, SYSTEM_CATEGORIES),
        (CategoryType.NORMAL, NORMAL_CATEGORIES),
    ):
        for entry in entries:
            if Category.query.filter_by(slug=entry["slug"]).first():
                click.echo(f"  = {entry['name']} already exists")
                continue
            db.session.add(Category(type=category_type, **entry))
            created += 1
            click.echo(f"  + {entry['name']} ({category_type.value})")

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        click.echo(f"Error creating categories: {str(e)}")
        raise

    CategoryService.invalidate_cache()
    click.echo(f"Created {created} categories.")
