from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..schemas import CategoryCreate, CategoryOut, ErrorOut, MessageOut
from ..services import CategoryService
from .deps import get_category_service

router = APIRouter(
    prefix="/api/categories",
    tags=["categories"],
)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[str],
    summary="List Categories",
    description="Return all category names, sorted alphabetically.",
    responses={
        200: {"description": "Categories retrieved successfully"},
        500: {"model": ErrorOut, "description": "Store error"},
    },
)
def list_categories(service: CategoryService = Depends(get_category_service)) -> List[str]:
    return service.list()


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=CategoryOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Category",
    description="Create a category. The name is trimmed and lowercased; duplicates are rejected.",
    responses={
        201: {"description": "Category created"},
        400: {"model": ErrorOut, "description": "Empty or duplicate name"},
    },
)
def create_category(payload: CategoryCreate, service: CategoryService = Depends(get_category_service)) -> CategoryOut:
    return CategoryOut(name=service.create(payload.name))


# PUBLIC_INTERFACE
@router.delete(
    "/{name:path}",
    response_model=MessageOut,
    summary="Delete Category",
    description=(
        "Delete a category by name (case-insensitive); names may contain '/'. "
        "Tasks that reference the category keep their category value."
    ),
    responses={
        200: {"description": "Category deleted"},
        404: {"model": ErrorOut, "description": "Category not found"},
    },
)
def delete_category(name: str, service: CategoryService = Depends(get_category_service)) -> MessageOut:
    service.delete(name)
    return MessageOut(message="Category deleted")
