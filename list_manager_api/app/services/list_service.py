"""
Business logic for subscriber lists.

The list service sits between the HTTP endpoints and a ``ListStore``.
It validates input before anything reaches the store, picks one of the
three retrieval modes and reshapes store records for transport:

* **single** – a positive ``list_id`` returns one list, or ``NotFound``;
* **minimal** – ``minimal=true`` returns every list without subscriber
  counts, which avoids the expensive aggregation entirely;
* **full** – a searchable, sortable, paginated query with subscriber
  counts.

Responses never expose ``None`` tags (an empty list is substituted) and
the per-status subscriber counts are collapsed into a single
``subscriber_count``.

The store and the localizer are injected, so the service holds no
global state and can be exercised with an in-memory fake store.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from ..core.config import settings
from ..core.errors import NotFound, ValidationError
from ..core.i18n import Localizer
from ..core.pagination import Pagination, get_pagination
from ..schemas.list import ListCreate, ListRead, ListsPage, ListUpdate
from .list_store import ListRecord, ListStore


logger = logging.getLogger(__name__)

# Columns clients may sort by.  Anything else is replaced by the default
# before the store sees it.
LIST_QUERY_SORT_FIELDS = ("name", "type", "subscriber_count", "created_at", "updated_at")
DEFAULT_SORT_FIELD = "created_at"
SORT_ASC = "asc"
SORT_DESC = "desc"


@dataclass
class ListQueryParams:
    """Parsed parameters of a list retrieval request."""

    list_id: int = 0
    query: str = ""
    tags: List[str] = field(default_factory=list)
    order_by: str = ""
    order: str = ""
    minimal: bool = False
    pagination: Pagination = field(default_factory=get_pagination)


class ListService:
    """Service for querying and managing lists."""

    def __init__(
        self,
        store: ListStore,
        i18n: Localizer,
        max_name_len: Optional[int] = None,
    ) -> None:
        self.store = store
        self.i18n = i18n
        self.max_name_len = max_name_len or settings.std_input_max_len

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------
    async def get_lists(self, params: ListQueryParams) -> Union[ListRead, ListsPage, List[ListRead]]:
        """Retrieve one list, all lists (minimal) or a page of lists.

        Returns a ``ListRead`` for single-record requests, a
        ``ListsPage`` for listings with results and an empty list when
        a listing matches nothing.  Full queries may be slow as they
        aggregate subscriber counts per list.
        """
        single = params.list_id > 0

        if not single and params.minimal:
            records = self.store.get_lists()
            if not records:
                return []
            results = [self._to_read(r, aggregate=False) for r in records]
            return ListsPage(results=results, total=len(results), per_page=len(results), page=1)

        if single:
            # Listing filters and paging do not apply to a single-record lookup.
            records, _ = self.store.query_lists(list_id=params.list_id)
            if not records:
                logger.info("List %s not found", params.list_id)
                raise NotFound(self.i18n.ts("globals.messages.notFound", name="{globals.terms.list}"))
            return self._to_read(records[0])

        pg = params.pagination
        order_by, order = self._sanitize_sort(params.order_by, params.order)
        records, total = self.store.query_lists(
            query=params.query.strip(),
            tags=params.tags,
            order_by=order_by,
            order=order,
            offset=pg.offset,
            limit=pg.limit,
        )
        if not records:
            return []

        results = [self._to_read(r) for r in records]

        return ListsPage(
            results=results,
            total=total,
            per_page=pg.per_page or total,
            page=pg.page,
        )

    def _sanitize_sort(self, order_by: str, order: str) -> Tuple[str, str]:
        order_by = (order_by or "").strip()
        if order_by not in LIST_QUERY_SORT_FIELDS:
            if order_by:
                logger.debug("Ignoring unsupported sort field %r", order_by)
            order_by = DEFAULT_SORT_FIELD
        order = (order or "").strip().lower()
        if order not in (SORT_ASC, SORT_DESC):
            order = SORT_DESC
        return order_by, order

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    async def create_list(self, data: ListCreate) -> ListRead:
        """Validate and create a list."""
        data = self._validate(data)
        record = self.store.create_list(data)
        return self._to_read(record)

    async def update_list(self, list_id: int, data: ListUpdate) -> ListRead:
        """Validate and update an existing list.

        Raises ``ValidationError`` for a non-positive id before looking
        at the payload.  ``NotFound`` from the store is passed through.
        """
        self.check_id(list_id)
        data = self._validate(data)
        record = self.store.update_list(list_id, data)
        return self._to_read(record)

    async def delete_lists(self, list_id: int = 0, ids: Sequence[int] = ()) -> bool:
        """Delete a single list (``list_id``) and/or a batch of lists (``ids``)."""
        to_delete = [i for i in ids if i > 0]
        if list_id > 0:
            to_delete.append(list_id)
        if not to_delete:
            raise ValidationError(self.i18n.t("globals.messages.invalidID"))
        self.store.delete_lists(to_delete)
        return True

    def check_id(self, list_id: int) -> None:
        """Raise ``ValidationError`` unless ``list_id`` is a positive id."""
        if list_id < 1:
            raise ValidationError(self.i18n.t("globals.messages.invalidID"))

    def _validate(self, data: ListCreate) -> ListCreate:
        # Length is counted in characters, after trimming surrounding whitespace.
        name = (data.name or "").strip()
        if not 1 <= len(name) <= self.max_name_len:
            raise ValidationError(self.i18n.t("lists.invalidName"))
        return type(data)(
            name=name,
            type=data.type,
            optin=data.optin,
            tags=data.tags,
            description=data.description,
        )

    # ------------------------------------------------------------------
    # Shaping
    # ------------------------------------------------------------------
    @staticmethod
    def _to_read(record: ListRecord, aggregate: bool = True) -> ListRead:
        """Convert a store record to its API representation."""
        subscriber_count = sum(record.subscriber_counts.values()) if aggregate else 0
        return ListRead(
            id=record.id,
            uuid=record.uuid,
            name=record.name,
            type=record.type,
            optin=record.optin,
            tags=list(record.tags) if record.tags is not None else [],
            description=record.description or "",
            subscriber_count=subscriber_count,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
