"""Management API repository for Kontent.ai projects."""

import time
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .base import ContentRepository
from ..errors import NotFoundError, RemoteCallError
from ..models.reference import Reference
from ..models.migration import MigrationConfig
from ..models.content import (
    ContentItem,
    ContentSnippet,
    ContentType,
    LanguageVariant,
    WorkflowStep,
)
from ..tracker import UsageTracker

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ManagementAPIRepository(ContentRepository):
    """
    Repository backed by the Management API (v2).

    Handles:
    - Bearer authentication
    - Rate limiting
    - Continuation-token pagination
    - Retrying throttled (429) requests, which the API rejects unexecuted
    """

    def __init__(
        self,
        config: MigrationConfig,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the repository.

        Args:
            config: Connection settings
            session: Custom requests session
        """
        self.config = config
        self.project_url = f"{config.base_url.rstrip('/')}/projects/{config.project_id}"
        self._last_request_time = 0.0
        self._session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session with authentication and throttling retries."""
        session = requests.Session()

        retries = Retry(
            total=self.config.retry_config.get("max_retries", 3),
            backoff_factor=self.config.retry_config.get("backoff_factor", 2.0),
            status_forcelist=[429],
            allowed_methods=frozenset({"GET", "PUT"}),
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

        if self.config.api_key:
            session.headers["Authorization"] = f"Bearer {self.config.api_key}"
        session.headers["Content-Type"] = "application/json"

        return session

    def _rate_limit_wait(self):
        """Wait to respect rate limits."""
        if self.config.rate_limit > 0:
            elapsed = time.time() - self._last_request_time
            wait_time = (1.0 / self.config.rate_limit) - elapsed
            if wait_time > 0:
                time.sleep(wait_time)
        self._last_request_time = time.time()

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Extract the API's error message from a failed response."""
        try:
            error_data = response.json()
        except ValueError:
            return response.text or response.reason or ""

        if isinstance(error_data, dict):
            message = error_data.get("message") or str(error_data)
            validation_errors = error_data.get("validation_errors") or []
            details = [e.get("message", "") for e in validation_errors if isinstance(e, dict)]
            if details:
                message = f"{message} ({'; '.join(details)})"
            return message
        return str(error_data)

    def _request(
        self,
        tracker: UsageTracker,
        operation: str,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        read: bool = False
    ) -> requests.Response:
        """
        Issue one tracked API call.

        Args:
            tracker: Tracker of the current request
            operation: Operation name used for tracking and errors
            method: HTTP method
            path: Path relative to the project URL
            body: JSON body
            headers: Extra headers
            read: If True, a 404 means the referenced object does not exist

        Returns:
            The successful response
        """
        url = f"{self.project_url}/{path}"

        self._rate_limit_wait()
        tracker.record_call(operation)

        try:
            response = self._session.request(
                method,
                url,
                json=body,
                headers=headers,
                timeout=self.config.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise RemoteCallError(f"{operation} failed: {e}", operation=operation) from e

        if response.status_code == 404 and read:
            raise NotFoundError(f"{operation}: {self._error_message(response)}", {"path": path})

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise RemoteCallError(
                f"{operation} failed with HTTP {response.status_code}: {self._error_message(response)}",
                operation=operation,
                remote_status=response.status_code,
            ) from e

        return response

    @staticmethod
    def _parse(operation: str, response: requests.Response, build: Callable[[Any], T]) -> T:
        """
        Decode a successful response and build models from it.

        Raises:
            RemoteCallError: if the body is not JSON or not the expected shape
        """
        try:
            return build(response.json() if response.text else {})
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise RemoteCallError(
                f"{operation} returned an unreadable response: {e}",
                operation=operation,
                remote_status=response.status_code,
            ) from e

    @staticmethod
    def _listed(data: Any, key: str) -> List[Dict[str, Any]]:
        """Listing payloads are either a bare array or an object wrapping one."""
        if isinstance(data, dict):
            return data.get(key, [])
        return data

    @staticmethod
    def _item_path(item: Reference) -> str:
        return f"items/{item.path_segment()}"

    def _variant_path(self, variant: LanguageVariant) -> str:
        return f"{self._item_path(variant.item)}/variants/{variant.language.path_segment()}"

    def get_item(self, tracker: UsageTracker, item: Reference) -> ContentItem:
        response = self._request(tracker, "get_item", "GET", self._item_path(item), read=True)
        return self._parse("get_item", response, ContentItem.from_dict)

    def get_variant(
        self,
        tracker: UsageTracker,
        item: Reference,
        language: Reference
    ) -> LanguageVariant:
        path = f"{self._item_path(item)}/variants/{language.path_segment()}"
        response = self._request(tracker, "get_variant", "GET", path, read=True)
        return self._parse("get_variant", response, LanguageVariant.from_dict)

    def list_variants(self, tracker: UsageTracker, item: Reference) -> List[LanguageVariant]:
        path = f"{self._item_path(item)}/variants"
        response = self._request(tracker, "list_variants", "GET", path, read=True)
        return self._parse(
            "list_variants",
            response,
            lambda data: [LanguageVariant.from_dict(v) for v in self._listed(data, "variants")],
        )

    def upsert_item(self, tracker: UsageTracker, item: ContentItem) -> ContentItem:
        if item.id:
            reference = Reference.by_id(item.id)
        elif item.external_id:
            reference = Reference.by_external_id(item.external_id)
        else:
            raise ValueError("Item needs an id or external id to be upserted")

        response = self._request(
            tracker, "upsert_item", "PUT", self._item_path(reference), body=item.to_upsert_dict()
        )
        return self._parse("upsert_item", response, ContentItem.from_dict)

    def upsert_variant(self, tracker: UsageTracker, variant: LanguageVariant) -> LanguageVariant:
        response = self._request(
            tracker, "upsert_variant", "PUT", self._variant_path(variant), body=variant.to_upsert_dict()
        )
        return self._parse("upsert_variant", response, LanguageVariant.from_dict)

    def create_new_version(self, tracker: UsageTracker, variant: LanguageVariant) -> None:
        self._request(tracker, "create_new_version", "PUT", f"{self._variant_path(variant)}/new-version")

    def publish_variant(self, tracker: UsageTracker, variant: LanguageVariant) -> None:
        self._request(tracker, "publish_variant", "PUT", f"{self._variant_path(variant)}/publish")

    def change_workflow_step(
        self,
        tracker: UsageTracker,
        variant: LanguageVariant,
        step: Reference
    ) -> None:
        path = f"{self._variant_path(variant)}/workflow/{step.path_segment()}"
        self._request(tracker, "change_workflow_step", "PUT", path)

    def list_workflow_steps(self, tracker: UsageTracker) -> List[WorkflowStep]:
        response = self._request(tracker, "list_workflow_steps", "GET", "workflow", read=True)
        return self._parse(
            "list_workflow_steps",
            response,
            lambda data: [WorkflowStep.from_dict(s) for s in self._listed(data, "steps")],
        )

    def list_content_types(self, tracker: UsageTracker) -> List[ContentType]:
        """Get all content types, following continuation tokens."""
        types: List[ContentType] = []
        continuation: Optional[str] = None

        while True:
            headers = {"x-continuation": continuation} if continuation else None
            response = self._request(
                tracker, "list_content_types", "GET", "types", headers=headers, read=True
            )
            page, continuation = self._parse("list_content_types", response, self._types_page)
            types.extend(page)
            if not continuation:
                break

        logger.debug(f"Listed {len(types)} content types")
        return types

    @staticmethod
    def _types_page(data: Dict[str, Any]) -> Tuple[List[ContentType], Optional[str]]:
        page = [ContentType.from_dict(t) for t in data.get("types", [])]
        return page, (data.get("pagination") or {}).get("continuation_token")

    def get_snippet(self, tracker: UsageTracker, snippet: Reference) -> ContentSnippet:
        response = self._request(
            tracker, "get_snippet", "GET", f"snippets/{snippet.path_segment()}", read=True
        )
        return self._parse("get_snippet", response, ContentSnippet.from_dict)
