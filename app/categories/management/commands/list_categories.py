import click
from flask.cli import with_appcontext
from app.categories.models import Category


@click.command("list-categories")
@with_appcontext
def list_categories():
    """List categories in display order."""

    categories = Category.query.order_by(Category.order, Category.name).all()

    if not categories:
        click.echo("No categories found. Run 'flask populate-categories' to create them.")
        return

    for category in categories:
        click.echo(
            f"{category.order:>3}  {category.slug:<16} {category.name:<16} {category.type.value}"
        )
