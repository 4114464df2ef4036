import click
from flask.cli import with_appcontext

from app.libs.errors import APIError
from app.users.services import UserService


@click.command("make-admin")
@click.argument("email")
@with_appcontext
def make_admin(email):
    """Give the ADMIN role to the user registered with EMAIL."""
    try:
        user = UserService.make_admin(email)
    except APIError as e:
        raise click.ClickException(e.message)
    click.echo(f"{user.username} ({email}) is now an admin.")
