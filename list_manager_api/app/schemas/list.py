"""
Pydantic schemas for subscriber lists.

A list is a named segment of subscribers.  Its ``type`` controls
visibility (``public`` lists appear on subscription forms, ``private``
ones do not, ``temporary`` ones are throwaway segments) and ``optin``
selects single or double opt-in for new subscriptions.  ``tags`` are
free-form labels used to organise lists in the admin UI.

Name length is checked by the list service rather than here so that an
empty or over-long name produces the localized 400 response instead of
a generic 422 validation error.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field, validator


LIST_TYPES = ("public", "private", "temporary")
OPTIN_TYPES = ("single", "double")


class ListCreate(BaseModel):
    """Schema for creating a new list."""

    name: str = Field("", description="Display name of the list")
    type: str = Field("private", description="One of: public, private, temporary")
    optin: str = Field("single", description="Opt-in mode: single or double")
    tags: Optional[List[str]] = Field(None, description="Free-form labels for the list")
    description: str = Field("", description="Optional description shown in the admin UI")

    @validator("type")
    def validate_type(cls, v):
        code = (v or "").strip().lower()
        if code not in LIST_TYPES:
            raise ValueError(f"Unsupported list type '{v}'. Allowed: {', '.join(LIST_TYPES)}")
        return code

    @validator("optin")
    def validate_optin(cls, v):
        code = (v or "").strip().lower()
        if code not in OPTIN_TYPES:
            raise ValueError(f"Unsupported optin '{v}'. Allowed: {', '.join(OPTIN_TYPES)}")
        return code

    @validator("tags")
    def validate_tags(cls, v):
        """Strip tags, drop empty ones and remove duplicates, keeping order."""
        if v is None:
            return None
        seen = set()
        cleaned: List[str] = []
        for item in v:
            tag = item.strip()
            if tag and tag not in seen:
                seen.add(tag)
                cleaned.append(tag)
        return cleaned


class ListUpdate(ListCreate):
    """Schema for updating a list.

    Updates replace every field, so the payload is validated exactly
    like a creation payload.
    """


class ListRead(BaseModel):
    """Schema for reading a list."""

    id: int
    uuid: str
    name: str
    type: str
    optin: str
    tags: List[str] = Field(default_factory=list)
    description: str = ""
    subscriber_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ListsPage(BaseModel):
    """Paginated envelope returned by list queries."""

    results: List[ListRead]
    total: int
    per_page: int
    page: int


class ListResponse(BaseModel):
    data: ListRead


class ListsResponse(BaseModel):
    # An empty query answers with ``{"data": []}`` rather than an empty page.
    data: Union[ListsPage, ListRead, List[ListRead]]


class DeleteResponse(BaseModel):
    data: bool
