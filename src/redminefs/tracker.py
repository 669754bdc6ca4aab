"""
Remote tracker client.

The node tree only needs three calls from the tracker, described by the
``TrackerClient`` protocol. ``RedmineClient`` implements them against the
Redmine REST API.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import requests

from .errors import AuthError, NotFoundError, TransportError
from .identity import check_identifier

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Project:
    id: int
    name: str


@dataclass(frozen=True)
class Issue:
    id: int
    subject: str


class TrackerClient(Protocol):
    """Operations the node tree consumes from a remote tracker."""

    def list_projects(self) -> list[Project]: ...

    def list_issues(self, project_id: int) -> list[Issue]: ...

    def get_issue_body(self, issue_id: int) -> str: ...


class RedmineClient:
    """
    Thin Redmine REST client.

    Args:
        endpoint: Base URL of the Redmine instance (e.g., "https://redmine.example.com")
        apikey: API key sent as X-Redmine-API-Key
        insecure: Skip TLS certificate verification
        timeout: Seconds to wait for each request
        session: Optional pre-built session (used by tests)
    """

    def __init__(
        self,
        endpoint: str,
        apikey: str,
        insecure: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["X-Redmine-API-Key"] = apikey
        self.session.headers["Accept"] = "application/json"
        if insecure:
            self.session.verify = False

    def list_projects(self) -> list[Project]:
        """List every project visible to the API key, in tracker order."""
        items = self._get_paged("/projects.json", "projects")
        try:
            return [
                Project(id=check_identifier(int(item["id"])), name=str(item["name"]))
                for item in items
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(f"Malformed project in /projects.json: {e!r}") from e

    def list_issues(self, project_id: int) -> list[Issue]:
        """List the issues of one project, in tracker order."""
        items = self._get_paged("/issues.json", "issues", {"project_id": project_id})
        try:
            return [
                Issue(
                    id=check_identifier(int(item["id"])),
                    subject=str(item.get("subject") or ""),
                )
                for item in items
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise TransportError(f"Malformed issue in /issues.json: {e!r}") from e

    def get_issue_body(self, issue_id: int) -> str:
        """Return the description of one issue (empty when unset)."""
        data = self._get(f"/issues/{issue_id}.json")
        try:
            issue = data["issue"]
        except (KeyError, TypeError) as e:
            raise TransportError(f"Malformed issue payload for #{issue_id}") from e
        return issue.get("description") or ""

    def _get_paged(
        self,
        path: str,
        key: str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Follow Redmine's limit/offset paging until total_count is reached."""
        items: list[dict[str, Any]] = []
        offset = 0
        while True:
            page_params = dict(params or {})
            page_params.update({"limit": PAGE_SIZE, "offset": offset})
            data = self._get(path, page_params)
            try:
                page = data[key]
                total = int(data.get("total_count", len(page)))
            except (KeyError, TypeError, ValueError) as e:
                raise TransportError(f"Malformed response from {path}") from e

            items.extend(page)
            offset += len(page)
            if not page or offset >= total:
                return items

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = self.endpoint + path
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        if response.status_code in (401, 403):
            raise AuthError(f"Redmine rejected the API key ({response.status_code})")
        if response.status_code == 404:
            raise NotFoundError(f"Not found: {path}")
        if not response.ok:
            raise TransportError(
                f"Unexpected status {response.status_code} from {url}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from {url}") from e
