import logging

from typing import List
from fastapi import APIRouter, Depends, status

from app.core.config import settings
from app.schemas.book_schema import BookCreate, BookResponse, BookUpdate
from app.schemas.response_schema import APIResponse
from app.services.book_service import BookService
from app.utils.deps import get_book_id, get_book_service


logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Books"],
    prefix=f"{settings.API_V1_STR}/books",
)


@router.get(
    "",
    response_model=APIResponse[List[BookResponse]],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Get all books",
    description="Retrieve every book that has not been deleted",
)
async def get_books(*, book_service: BookService = Depends(get_book_service)):
    books = await book_service.get_all_books()
    return APIResponse.ok("Books retrieved successfully", books)


@router.get(
    "/{book_id}",
    response_model=APIResponse[BookResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Get book by id",
)
async def get_book(
    *,
    book_id: int = Depends(get_book_id),
    book_service: BookService = Depends(get_book_service),
):
    """Get book by its ID"""
    book = await book_service.get_book_by_id(book_id)
    return APIResponse.ok("Book retrieved successfully", book)


@router.post(
    "",
    response_model=APIResponse[BookResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
)
async def create_book(
    *,
    book_data: BookCreate,
    book_service: BookService = Depends(get_book_service),
):
    """
    Create a new book.
    - **title**: The title of the book (required)
    - **author**: The author of the book (required)
    - **isbn**: 10-20 characters, unique among existing books (required)
    - **published_year**: 1000-2100 (required)
    - **genre**: The genre of the book (required)
    - **available_copies**: Defaults to 0
    """
    book = await book_service.create_book(book_data)
    return APIResponse.ok("Book created successfully", book)


@router.put(
    "/{book_id}",
    response_model=APIResponse[BookResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Update a book",
)
async def update_book(
    *,
    book_data: BookUpdate,
    book_id: int = Depends(get_book_id),
    book_service: BookService = Depends(get_book_service),
):
    """
    Update a book.

    Only provided fields will be updated.
    """
    book = await book_service.update_book(book_id, book_data)
    return APIResponse.ok("Book updated successfully", book)


@router.delete(
    "/{book_id}",
    response_model=APIResponse[None],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Delete a book",
)
async def delete_book(
    *,
    book_id: int = Depends(get_book_id),
    book_service: BookService = Depends(get_book_service),
):
    await book_service.delete_book(book_id)
    return APIResponse.ok("Book deleted successfully")
