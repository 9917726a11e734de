"""
Admin accounts, login and dashboard counters.

Field rules
-----------
- username: 3-50 chars of letters, digits and underscores.  At login the
  identifier may be an email instead, in which case it is checked as one.
- email: ``local@domain.tld``
- password: 6-100 chars
"""

import logging
import re
from typing import Dict, List, Optional

from sarradabet.auth import generate_token, hash_password, verify_password
from sarradabet.errors import UnauthorizedError, ValidationError
from sarradabet.models import Admin
from sarradabet.repositories.admins import AdminRepository
from sarradabet.schemas import AdminCreate, AdminLogin, AdminResponse, AdminUpdate, AdminWithToken
from sarradabet.services.base import BaseService

logger = logging.getLogger(__name__)

USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_MIN, USERNAME_MAX = 3, 50
PASSWORD_MIN, PASSWORD_MAX = 6, 100


def validate_admin_fields(
    username: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = None,
) -> None:
    """Collect every rule violation and raise them together."""
    errors: List[str] = []

    if username is not None:
        if not username.strip():
            errors.append("Username or email is required")
        elif "@" in username:
            if not EMAIL_RE.match(username):
                errors.append("Invalid email format")
        elif len(username) < USERNAME_MIN:
            errors.append(f"Username must be at least {USERNAME_MIN} characters long")
        elif len(username) > USERNAME_MAX:
            errors.append(f"Username cannot exceed {USERNAME_MAX} characters")
        elif not USERNAME_RE.match(username):
            errors.append("Username can only contain letters, numbers, and underscores")

    if email is not None:
        if not email.strip():
            errors.append("Email is required")
        elif not EMAIL_RE.match(email):
            errors.append("Invalid email format")

    if password is not None:
        if not password:
            errors.append("Password is required")
        elif len(password) < PASSWORD_MIN:
            errors.append(f"Password must be at least {PASSWORD_MIN} characters long")
        elif len(password) > PASSWORD_MAX:
            errors.append(f"Password cannot exceed {PASSWORD_MAX} characters")

    if errors:
        raise ValidationError("Validation failed", context={"errors": errors})


class AdminService(BaseService):
    entity_name = "Admin"

    def __init__(self, repository: AdminRepository):
        super().__init__(repository)
        self.repository = repository

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def login(self, data: AdminLogin) -> AdminWithToken:
        validate_admin_fields(username=data.username, password=data.password)

        admin = self.repository.find_by_login(data.username)
        if admin is None or not verify_password(data.password, admin.password_hash):
            logger.warning("Failed admin login for %s", data.username)
            raise UnauthorizedError("Invalid credentials")

        logger.info("Admin %d logged in", admin.id)
        return self._with_token(admin)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, data: AdminCreate) -> AdminWithToken:
        if "@" in data.username:
            # Usernames may not look like emails; the login form accepts both
            raise ValidationError(
                "Validation failed",
                context={"errors": ["Username can only contain letters, numbers, and underscores"]},
            )
        validate_admin_fields(username=data.username, email=data.email, password=data.password)
        self._ensure_unique(data.username, data.email)

        admin = self.repository.create(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
        )
        logger.info("Admin %d created: %s", admin.id, admin.username)
        return self._with_token(admin)

    def get_by_id(self, admin_id: int) -> Admin:
        return self.find_by_id(admin_id)

    def get_all(self) -> List[Admin]:
        return self.repository.find_all()

    def update(self, admin_id: int, data: AdminUpdate) -> Admin:
        admin = self.find_by_id(admin_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "username" in changes and "@" in changes["username"]:
            raise ValidationError(
                "Validation failed",
                context={"errors": ["Username can only contain letters, numbers, and underscores"]},
            )
        validate_admin_fields(**changes)
        self._ensure_unique(changes.get("username"), changes.get("email"), exclude_id=admin_id)

        password = changes.pop("password", None)
        if password is not None:
            changes["password_hash"] = hash_password(password)

        updated = self.repository.update(admin, **changes)
        logger.info("Admin %d updated: %s", admin_id, sorted(changes))
        return updated

    def delete(self, admin_id: int) -> None:
        admin = self.find_by_id(admin_id)
        self.repository.delete(admin)
        logger.info("Admin %d deleted", admin_id)

    def stats(self) -> Dict[str, int]:
        return self.repository.stats()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_unique(
        self,
        username: Optional[str],
        email: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> None:
        existing = self.repository.find_conflicting(username=username, email=email, exclude_id=exclude_id)
        if existing is None:
            return
        if username and existing.username == username:
            raise ValidationError("Username already exists")
        if email and existing.email == email:
            raise ValidationError("Email already exists")

    @staticmethod
    def _with_token(admin: Admin) -> AdminWithToken:
        token = generate_token(admin.id, admin.username, admin.email)
        profile = AdminResponse.model_validate(admin).model_dump()
        return AdminWithToken(**profile, token=token)
