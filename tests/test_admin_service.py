"""Tests for AdminService: field rules, uniqueness and login."""

import pytest
from datetime import datetime
from unittest.mock import MagicMock, patch

from sarradabet.auth import hash_password, verify_token
from sarradabet.errors import NotFoundError, UnauthorizedError, ValidationError
from sarradabet.schemas import AdminCreate, AdminLogin, AdminUpdate
from sarradabet.services.admins import AdminService, validate_admin_fields


def _admin(admin_id=1, username="root_admin", email="root@example.com", password="s3cret!"):
    a = MagicMock()
    a.id = admin_id
    a.username = username
    a.email = email
    a.password_hash = hash_password(password, iterations=1000)
    a.created_at = datetime(2025, 1, 1)
    a.updated_at = datetime(2025, 1, 1)
    return a


def _service(by_login=None, conflicting=None, existing=None):
    repo = MagicMock()
    repo.find_by_login.return_value = by_login
    repo.find_conflicting.return_value = conflicting
    repo.find_unique.return_value = existing
    repo.create.side_effect = lambda **kw: _admin(
        admin_id=2, username=kw["username"], email=kw["email"]
    )
    repo.update.side_effect = lambda a, **kw: a
    return AdminService(repo), repo


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("fields", [
    {"username": "ab"},
    {"username": "x" * 51},
    {"username": "bad name"},
    {"username": "not@an-email"},
    {"email": "nope"},
    {"email": "a@b"},
    {"password": "12345"},
    {"password": "p" * 101},
])
def test_invalid_fields(fields):
    with pytest.raises(ValidationError) as exc:
        validate_admin_fields(**fields)
    assert exc.value.message == "Validation failed"
    assert len(exc.value.context["errors"]) == 1


@pytest.mark.parametrize("fields", [
    {"username": "abc"},
    {"username": "user_01"},
    {"username": "root@example.com"},
    {"email": "a@b.co"},
    {"password": "123456"},
    {"password": "p" * 100},
])
def test_valid_fields(fields):
    validate_admin_fields(**fields)


def test_errors_are_collected():
    with pytest.raises(ValidationError) as exc:
        validate_admin_fields(username="a", email="bad", password="1")
    assert len(exc.value.context["errors"]) == 3


# ---------------------------------------------------------------------------
# login
# ---------------------------------------------------------------------------

def test_login_returns_profile_and_token():
    service, repo = _service(by_login=_admin())
    result = service.login(AdminLogin(username="root_admin", password="s3cret!"))

    assert result.username == "root_admin"
    assert result.token.token_type == "Bearer"
    claims = verify_token(result.token.access_token)
    assert claims["adminId"] == 1
    assert "passwordHash" not in result.dump()


def test_login_with_email():
    service, repo = _service(by_login=_admin())
    service.login(AdminLogin(username="root@example.com", password="s3cret!"))
    repo.find_by_login.assert_called_once_with("root@example.com")


def test_login_wrong_password():
    service, _ = _service(by_login=_admin())
    with pytest.raises(UnauthorizedError) as exc:
        service.login(AdminLogin(username="root_admin", password="wrong-pass"))
    assert exc.value.message == "Invalid credentials"


def test_login_unknown_user():
    service, _ = _service(by_login=None)
    with pytest.raises(UnauthorizedError):
        service.login(AdminLogin(username="ghost_user", password="whatever"))


# ---------------------------------------------------------------------------
# create / update / delete
# ---------------------------------------------------------------------------

def test_create_hashes_password():
    service, repo = _service()
    result = service.create(AdminCreate(username="new_admin", email="new@example.com", password="hunter22"))

    stored = repo.create.call_args.kwargs["password_hash"]
    assert stored != "hunter22"
    assert stored.startswith("pbkdf2_sha256$")
    assert result.id == 2
    assert result.token.access_token


def test_create_duplicate_username():
    service, repo = _service(conflicting=_admin(username="taken", email="other@example.com"))
    with pytest.raises(ValidationError) as exc:
        service.create(AdminCreate(username="taken", email="new@example.com", password="hunter22"))
    assert exc.value.message == "Username already exists"
    repo.create.assert_not_called()


def test_create_duplicate_email():
    service, _ = _service(conflicting=_admin(username="someone", email="dup@example.com"))
    with pytest.raises(ValidationError) as exc:
        service.create(AdminCreate(username="fresh", email="dup@example.com", password="hunter22"))
    assert exc.value.message == "Email already exists"


def test_create_rejects_email_as_username():
    service, repo = _service()
    with pytest.raises(ValidationError):
        service.create(AdminCreate(username="a@b.com", email="a@b.com", password="hunter22"))
    repo.create.assert_not_called()


def test_update_rehashes_password():
    existing = _admin()
    service, repo = _service(existing=existing)
    with patch("sarradabet.services.admins.hash_password", return_value="HASHED") as hp:
        service.update(1, AdminUpdate(password="brand-new"))
    hp.assert_called_once_with("brand-new")
    repo.update.assert_called_once_with(existing, password_hash="HASHED")


def test_update_checks_uniqueness_against_others():
    service, repo = _service(existing=_admin())
    service.update(1, AdminUpdate(email="fresh@example.com"))
    repo.find_conflicting.assert_called_once_with(username=None, email="fresh@example.com", exclude_id=1)


def test_delete_missing_admin():
    service, repo = _service(existing=None)
    with pytest.raises(NotFoundError):
        service.delete(9)
    repo.delete.assert_not_called()


def test_stats_passthrough():
    service, repo = _service()
    repo.stats.return_value = {"total_bets": 1, "total_categories": 1, "total_votes": 0, "active_bets": 1}
    assert service.stats()["total_bets"] == 1
