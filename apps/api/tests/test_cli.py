"""Tests for the admin CLI."""
from click.testing import CliRunner

from app import cli as cli_module
from app.db.enums import Role
from app.db.models import User


def test_set_role_grants_admin(db, make_user, monkeypatch):
    user_id = make_user(Role.CONVEYANCER, email="ops@properly.test").id
    monkeypatch.setattr(cli_module, "SessionLocal", lambda: db)

    result = CliRunner().invoke(cli_module.cli, ["set-role", "--email", "OPS@properly.test", "--role", "admin"])

    assert result.exit_code == 0, result.output
    assert "is now ADMIN" in result.output
    refreshed = db.get(User, user_id)
    assert refreshed.role == Role.ADMIN.value


def test_set_role_unknown_email(db, monkeypatch):
    monkeypatch.setattr(cli_module, "SessionLocal", lambda: db)
    result = CliRunner().invoke(cli_module.cli, ["set-role", "--email", "nobody@x.test", "--role", "BROKER"])
    assert result.exit_code == 1
    assert "No user" in result.output


def test_seed_reports_status(db, monkeypatch):
    monkeypatch.setattr(cli_module, "SessionLocal", lambda: db)
    first = CliRunner().invoke(cli_module.cli, ["seed"])
    assert first.exit_code == 0, first.output
    assert "seeded" in first.output

    second = CliRunner().invoke(cli_module.cli, ["seed"])
    assert "already_seeded" in second.output
