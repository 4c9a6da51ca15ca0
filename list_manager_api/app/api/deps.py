"""
Shared FastAPI dependencies.

The list service is built once by ``create_app`` and kept on
``app.state``; routes receive it through ``Depends(get_list_service)``.
Tests can swap it with ``app.dependency_overrides``.
"""

from fastapi import Request

from ..services.list_service import ListService


def get_list_service(request: Request) -> ListService:
    return request.app.state.list_service
