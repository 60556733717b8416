"""CLI tools for Properly administration."""

import click

from app.db.enums import Role
from app.db.session import SessionLocal
from app.services import demo_service, user_service


@click.group()
def cli():
    """Properly CLI tools."""
    pass


@cli.command()
def seed():
    """
    Seed demo users, the starter matter, referrals, notification templates
    and playbook articles.

    Safe to run repeatedly; existing rows are left alone.

    Example:
        python -m app.cli seed
    """
    db = SessionLocal()
    try:
        result = demo_service.seed_demo_data(db)
        click.echo(f"✓ {result['status']} (matter {result['matter_id']})")
        for user in result["users"]:
            click.echo(f"  {user['email']}: {user['role']} ({user['user_id']})")
    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
        raise SystemExit(1)
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="User email")
@click.option(
    "--role",
    required=True,
    type=click.Choice([r.value for r in Role], case_sensitive=False),
    help="New role",
)
def set_role(email: str, role: str):
    """
    Change a user's role. This is the only way to grant ADMIN.

    Example:
        python -m app.cli set-role --email ops@example.com --role ADMIN
    """
    db = SessionLocal()
    try:
        user = user_service.get_user_by_email(db, email.strip().lower())
        if not user:
            click.echo(f"❌ No user with email {email}")
            raise SystemExit(1)
        user_service.set_role(db, user, Role(role.upper()))
        click.echo(f"✓ {user.email} is now {user.role}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
