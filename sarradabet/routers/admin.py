"""
Admin endpoints.

``POST /admin/login`` is public; everything else requires
``Authorization: Bearer <token>``.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sarradabet.auth import get_current_admin
from sarradabet.models import get_db
from sarradabet.repositories.admins import AdminRepository
from sarradabet.responses import success_response
from sarradabet.schemas import AdminCreate, AdminLogin, AdminResponse, AdminStats, AdminUpdate
from sarradabet.services.admins import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    return AdminService(AdminRepository(db))


def _admin(admin) -> dict:
    return AdminResponse.model_validate(admin).dump()


@router.post("/login")
def login(body: AdminLogin, service: AdminService = Depends(get_admin_service)):
    result = service.login(body)
    return success_response(result.dump(), message="Login successful")


# ============================================================================
# AUTHENTICATED
# ============================================================================

@router.get("/profile")
def profile(
    claims: dict = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    admin = service.get_by_id(claims["adminId"])
    return success_response(_admin(admin))


@router.post("/logout")
def logout(claims: dict = Depends(get_current_admin)):
    # Tokens are stateless; the client drops its copy
    logger.info("Admin %d logged out", claims["adminId"])
    return success_response(None, message="Logout successful")


@router.get("/stats")
def stats(
    claims: dict = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return success_response(AdminStats(**service.stats()).dump())


@router.get("")
def list_admins(
    claims: dict = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return success_response([_admin(a) for a in service.get_all()])


@router.post("")
def create_admin(
    body: AdminCreate,
    claims: dict = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    result = service.create(body)
    logger.info("Admin %d created by admin %d", result.id, claims["adminId"])
    return success_response(result.dump(), message="Admin created successfully", status_code=201)


@router.get("/{admin_id}")
def get_admin(
    admin_id: int,
    claims: dict = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return success_response(_admin(service.get_by_id(admin_id)))


@router.put("/{admin_id}")
def update_admin(
    admin_id: int,
    body: AdminUpdate,
    claims: dict = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    admin = service.update(admin_id, body)
    return success_response(_admin(admin), message="Admin updated successfully")


@router.delete("/{admin_id}")
def delete_admin(
    admin_id: int,
    claims: dict = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    service.delete(admin_id)
    return success_response(None, message="Admin deleted successfully")
