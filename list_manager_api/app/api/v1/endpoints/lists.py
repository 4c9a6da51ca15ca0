"""
List endpoints for API v1.

These routes expose retrieval, creation, update and deletion of
subscriber lists.  Every successful response is wrapped as
``{"data": ...}``; failures answer with ``{"message": ...}`` and a 400
status (see ``core.errors``).

``GET /lists/`` accepts:

- **page**, **per_page** – pagination; ``per_page=all`` disables it.
- **query** – substring match on the list name.
- **tag** – repeatable; only lists carrying all given tags match.
- **order_by** – ``name``, ``type``, ``subscriber_count``, ``created_at``
  or ``updated_at``; other values are ignored.
- **order** – ``asc`` or ``desc``.
- **minimal** – when true, return all lists without subscriber counts.
"""

import dataclasses
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

from list_manager_api.app.core.config import settings
from list_manager_api.app.core.pagination import get_pagination
from list_manager_api.app.schemas.list import DeleteResponse, ListCreate, ListResponse, ListsResponse, ListUpdate
from list_manager_api.app.services.list_service import ListQueryParams, ListService
from list_manager_api.app.api.deps import get_list_service


router = APIRouter()

_TRUE_VALUES = {"1", "t", "true"}


def parse_bool(value: Optional[str]) -> bool:
    """Lenient boolean parsing for query strings; anything unrecognised is false."""
    return (value or "").strip().lower() in _TRUE_VALUES


def parse_id(value: Optional[str]) -> int:
    """Parse a path ID; anything that is not an integer becomes 0."""
    try:
        return int((value or "").strip())
    except ValueError:
        return 0


def list_query_params(
    page: Optional[str] = Query(None),
    per_page: Optional[str] = Query(None),
    query: str = Query(""),
    tag: List[str] = Query([]),
    order_by: str = Query(""),
    order: str = Query(""),
    minimal: Optional[str] = Query(None),
) -> ListQueryParams:
    """Collect the query string of a list request into ``ListQueryParams``."""
    return ListQueryParams(
        query=query.strip(),
        tags=[t.strip() for t in tag if t.strip()],
        order_by=order_by,
        order=order,
        minimal=parse_bool(minimal),
        pagination=get_pagination(page, per_page, settings.default_per_page),
    )


@router.get("/", response_model=ListsResponse)
async def get_lists(
    params: ListQueryParams = Depends(list_query_params),
    service: ListService = Depends(get_list_service),
) -> ListsResponse:
    """List lists with subscriber counts, or all lists when ``minimal`` is set."""
    return ListsResponse(data=await service.get_lists(params))


@router.get("/{list_id}", response_model=ListsResponse)
async def get_list(
    list_id: str,
    params: ListQueryParams = Depends(list_query_params),
    service: ListService = Depends(get_list_service),
) -> ListsResponse:
    """Retrieve a single list by its ID.

    Answers 400 if the list does not exist.  A non-positive or
    non-numeric ID behaves like ``GET /lists/``.
    """
    params = dataclasses.replace(params, list_id=parse_id(list_id))
    return ListsResponse(data=await service.get_lists(params))


@router.post("/", response_model=ListResponse)
async def create_list(
    list_in: ListCreate,
    service: ListService = Depends(get_list_service),
) -> ListResponse:
    """Create a new list."""
    return ListResponse(data=await service.create_list(list_in))


@router.put("/{list_id}", response_model=ListResponse)
async def update_list(
    list_id: str,
    body: Any = Body(None),
    service: ListService = Depends(get_list_service),
) -> ListResponse:
    """Replace the fields of an existing list.

    The ID is checked before the body is validated, so a bad ID always
    answers 400 ``Invalid ID``.
    """
    list_pk = parse_id(list_id)
    service.check_id(list_pk)
    if not isinstance(body, dict):
        raise RequestValidationError(
            [{"loc": ("body",), "msg": "Request body must be a JSON object", "type": "dict_type"}]
        )
    try:
        list_in = ListUpdate(**body)
    except PydanticValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("body",) + tuple(err["loc"])} for err in e.errors()]
        ) from e
    return ListResponse(data=await service.update_list(list_pk, list_in))


@router.delete("/{list_id}", response_model=DeleteResponse)
async def delete_list(
    list_id: str,
    service: ListService = Depends(get_list_service),
) -> DeleteResponse:
    """Delete a list.  Subscriptions to it are removed with it."""
    return DeleteResponse(data=await service.delete_lists(list_id=parse_id(list_id)))
