"""List Manager API client.

A thin wrapper around the HTTP surface of the lists API, for scripts
and other services that manage lists remotely.  The client uses the
``requests`` library internally.

Every public method returns a tuple ``(data, error)``:

* on success ``data`` is the unwrapped ``data`` member of the response
  body and ``error`` is ``None``;
* on failure ``data`` is ``None`` and ``error`` is a dictionary with
  keys ``status_code`` and ``message``.  ``message`` is the localized
  text sent by the server when there is one.

The client supports optional authentication via an API key which will
be sent in the ``Authorization`` header, for deployments that put the
API behind an authenticating proxy.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class ListsClient:
    """Client for the ``/api/v1/lists`` endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
        prefix: str = "/api/v1",
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:8000``.
            api_key: Optional API key sent as ``Bearer <api_key>``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
            prefix: Path prefix under which the API is mounted.
        """
        self.base_url = base_url.rstrip("/") + prefix.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request and unwrap the ``data`` envelope."""
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if not response.content:
                return None, None
            body = response.json()
            if isinstance(body, dict) and "data" in body:
                return body["data"], None
            return body, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("message") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # List operations
    # ------------------------------------------------------------------
    def list_lists(
        self,
        *,
        query: str = "",
        tags: Iterable[str] = (),
        order_by: str = "",
        order: str = "",
        page: Optional[int] = None,
        per_page: Optional[int | str] = None,
        minimal: bool = False,
    ) -> Result:
        """Query lists.

        Returns the paginated envelope (``results``, ``total``,
        ``per_page``, ``page``) or an empty list when nothing matches.
        """
        params: Dict[str, Any] = {}
        if query:
            params["query"] = query
        tags = list(tags)
        if tags:
            params["tag"] = tags
        if order_by:
            params["order_by"] = order_by
        if order:
            params["order"] = order
        if page is not None:
            params["page"] = page
        if per_page is not None:
            params["per_page"] = per_page
        if minimal:
            params["minimal"] = "true"
        return self._request("GET", "/lists/", params=params)

    def get_list(self, list_id: int) -> Result:
        return self._request("GET", f"/lists/{list_id}")

    def create_list(
        self,
        name: str,
        *,
        type: str = "private",
        optin: str = "single",
        tags: Optional[Iterable[str]] = None,
        description: str = "",
    ) -> Result:
        body = {
            "name": name,
            "type": type,
            "optin": optin,
            "tags": list(tags) if tags is not None else None,
            "description": description,
        }
        return self._request("POST", "/lists/", json_body=body)

    def update_list(self, list_id: int, fields: Dict[str, Any]) -> Result:
        """Replace a list's fields.  ``fields`` must include ``name``."""
        return self._request("PUT", f"/lists/{list_id}", json_body=fields)

    def delete_list(self, list_id: int) -> Result:
        return self._request("DELETE", f"/lists/{list_id}")
