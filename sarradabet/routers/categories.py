"""Category endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sarradabet.core.pagination import PageParams
from sarradabet.models import get_db
from sarradabet.repositories.categories import CategoryRepository
from sarradabet.responses import page_params, success_response
from sarradabet.schemas import CategoryCreate, CategoryResponse, CategoryUpdate
from sarradabet.services.categories import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(CategoryRepository(db))


def _category(category) -> dict:
    return CategoryResponse.model_validate(category).dump()


@router.get("")
def list_categories(
    params: PageParams = Depends(page_params),
    search: Optional[str] = Query(None, max_length=100),
    service: CategoryService = Depends(get_category_service),
):
    page = service.find_all(params, search=search)
    return success_response(
        [_category(c) for c in page.items],
        message="Categories retrieved successfully",
        meta=page.meta,
    )


@router.get("/search")
def search_categories(
    search_term: str = Query("", alias="searchTerm"),
    service: CategoryService = Depends(get_category_service),
):
    categories = service.search(search_term)
    return success_response(
        [_category(c) for c in categories],
        message="Categories retrieved successfully",
    )


@router.post("")
def create_category(body: CategoryCreate, service: CategoryService = Depends(get_category_service)):
    category = service.create(body)
    return success_response(
        {"category": _category(category)},
        message="Category created successfully",
        status_code=201,
    )


@router.get("/{category_id}")
def get_category(category_id: int, service: CategoryService = Depends(get_category_service)):
    category = service.find_by_id(category_id)
    return success_response({"category": _category(category)}, message="Category retrieved successfully")


@router.put("/{category_id}")
def update_category(
    category_id: int,
    body: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
):
    category = service.update(category_id, body)
    return success_response({"category": _category(category)}, message="Category updated successfully")


@router.delete("/{category_id}")
def delete_category(category_id: int, service: CategoryService = Depends(get_category_service)):
    service.delete(category_id)
    return success_response(None, message="Category deleted successfully")
