"""DataForSEO client

- search volume: live endpoint, or task_post + task_get polling
- SERP: organic results for one keyword

Every transport failure is re-raised as a ProviderError subclass.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Literal

import httpx
from pydantic import ValidationError as PydanticValidationError

from seodesc.api.constants import DATAFORSEO_ENDPOINTS
from seodesc.api.core.errors import (
    NoResultsError,
    ProviderAuthenticationError,
    ProviderError,
    ProviderNotConfiguredError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    TaskTimeoutError,
    ValidationError,
)

from .schemas import MonthlySearch, OrganicEntry, SearchVolumeRecord, SerpResult

logger = logging.getLogger(__name__)

PROVIDER = "dataforseo"

# DataForSEO body-level status codes
STATUS_OK = 20000
STATUS_TASK_CREATED = 20100
TASK_PENDING_CODES = frozenset({40601, 40602})

SERP_DEPTH = 10
DEFAULT_TIMEOUT = 30.0


def months_ago(months: int, today: date | None = None) -> str:
    """ISO date ``months`` calendar months before ``today`` (day clamped to 28)."""
    today = today or date.today()
    total = today.year * 12 + (today.month - 1) - months
    return date(total // 12, total % 12 + 1, min(today.day, 28)).isoformat()


def normalize_keyword(keyword: str) -> str:
    return keyword.strip().lower()


def competition_label(info: dict[str, Any]) -> str:
    """Competition as ``LOW``/``MEDIUM``/``HIGH``.

    The Google Ads layout reports a label; the ``keyword_info`` layout reports
    a 0..1 index next to an optional ``competition_level``.
    """
    level = info.get("competition_level")
    if isinstance(level, str) and level:
        return level
    value = info.get("competition")
    if isinstance(value, str) and value:
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        if value < 0.33:
            return "LOW"
        if value < 0.66:
            return "MEDIUM"
        return "HIGH"
    return "Unknown"


class DataForSEOClient:
    """Async DataForSEO API client.

    Args:
        login: API login
        password: API password
        base_url: API root
        mode: ``live`` (primary) or ``task`` (post + poll)
        poll_attempts: task_get attempts before TaskTimeoutError
        poll_base_delay: first poll delay in seconds
        poll_step: added delay per attempt (linear backoff)
        transport: httpx transport override (tests)
    """

    def __init__(
        self,
        login: str | None,
        password: str | None,
        base_url: str = "https://api.dataforseo.com",
        mode: Literal["live", "task"] = "live",
        poll_attempts: int = 5,
        poll_base_delay: float = 5.0,
        poll_step: float = 3.0,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not login or not password:
            raise ProviderNotConfiguredError(
                "DataForSEO credentials are not configured",
                provider=PROVIDER,
                missing_config=["DATAFORSEO_LOGIN", "DATAFORSEO_PASSWORD"],
            )
        self._auth = httpx.BasicAuth(login, password)
        self.base_url = base_url.rstrip("/")
        self.mode = mode
        self.poll_attempts = poll_attempts
        self.poll_base_delay = poll_base_delay
        self.poll_step = poll_step
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            auth=self._auth,
            timeout=self.timeout,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        )

    async def _request(self, method: str, endpoint: str, payload: list[dict[str, Any]] | None = None) -> dict[str, Any]:
        """Send one request and return the decoded body.

        Raises:
            ProviderAuthenticationError: 401/403
            ProviderRateLimitError: 429
            ProviderTimeoutError: transport timeout
            ProviderError: any other HTTP, network or body-level failure
        """
        logger.info("DataForSEO request", extra={"method": method, "endpoint": endpoint})
        try:
            async with self._client() as client:
                response = await client.request(method, endpoint, json=payload)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(f"DataForSEO request timed out: {endpoint}", PROVIDER, self.timeout) from e
        except httpx.RequestError as e:
            raise ProviderError(f"DataForSEO API: No response received ({e})", PROVIDER) from e

        if response.status_code in (401, 403):
            raise ProviderAuthenticationError(
                f"DataForSEO API Error: {response.status_code} - authentication failed",
                PROVIDER,
                status_code=response.status_code,
            )
        if response.status_code == 429:
            retry_after = response.headers.get("retry-after")
            raise ProviderRateLimitError(
                "DataForSEO API rate limit exceeded",
                PROVIDER,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderError(
                f"DataForSEO API Error: {response.status_code} - invalid JSON body",
                PROVIDER,
                status_code=response.status_code,
            ) from e
        if not isinstance(body, dict):
            raise ProviderError(
                f"DataForSEO API Error: {response.status_code} - unexpected {type(body).__name__} body",
                PROVIDER,
                status_code=response.status_code,
            )

        if response.status_code >= 400:
            raise ProviderError(
                f"DataForSEO API Error: {response.status_code} - {body.get('status_message', response.reason_phrase)}",
                PROVIDER,
                status_code=response.status_code,
            )

        status_code = body.get("status_code")
        if status_code is not None and status_code != STATUS_OK:
            raise ProviderError(
                f"DataForSEO API Error: {status_code} - {body.get('status_message', '')}",
                PROVIDER,
                status_code=status_code,
            )

        logger.info(
            "DataForSEO request successful",
            extra={"endpoint": endpoint, "status": body.get("status_message"), "tasks_count": body.get("tasks_count")},
        )
        return body

    # ------------------------------------------------------------------
    # Search volume
    # ------------------------------------------------------------------

    async def get_search_volume(
        self,
        keywords: list[str],
        location: int,
        language: str,
    ) -> list[SearchVolumeRecord]:
        """Search volume for each keyword, in input order.

        Every requested keyword yields exactly one record; keywords the
        provider has no data for get a zero-filled record.
        """
        if not keywords:
            raise ValidationError("keywords must contain at least one keyword", field="keywords")

        normalized = [normalize_keyword(k) for k in keywords]
        query = list(dict.fromkeys(k for k in normalized if k))
        logger.info(
            "Getting search volume",
            extra={"keyword_count": len(keywords), "location": location, "language": language, "mode": self.mode},
        )
        if not query:
            logger.info("No non-blank keywords, skipping provider call", extra={"keyword_count": len(keywords)})
            return [SearchVolumeRecord.empty(k) for k in keywords]

        task = {
            "keywords": query,
            "location_code": location,
            "language_code": language,
            "search_partners": False,
            "date_from": months_ago(12),
            "sort_by": "search_volume",
        }

        if self.mode == "task":
            items = await self._search_volume_via_task(task)
        else:
            body = await self._request("POST", DATAFORSEO_ENDPOINTS["search_volume_live"], [task])
            items = self._first_task_result(body, allow_empty=True)

        by_keyword = {}
        for item in items:
            record = self._parse_volume_item(item)
            if record is not None:
                by_keyword[normalize_keyword(record.keyword)] = record

        results = []
        for original, key in zip(keywords, normalized, strict=True):
            found = by_keyword.get(key)
            results.append(found.model_copy(update={"keyword": original}) if found else SearchVolumeRecord.empty(original))

        logger.info(
            "Search volume data retrieved",
            extra={"keyword_count": len(results), "with_data": sum(1 for k in normalized if k in by_keyword)},
        )
        return results

    async def _search_volume_via_task(self, task: dict[str, Any]) -> list[dict[str, Any]]:
        body = await self._request("POST", DATAFORSEO_ENDPOINTS["search_volume_task_post"], [task])
        created = self._first_task(body)
        if created is None or not created.get("id"):
            raise NoResultsError("No task created", PROVIDER)
        task_id = created["id"]
        logger.info("Search volume task created", extra={"task_id": task_id})
        return await self._poll_task(task_id)

    def poll_delay(self, attempt: int) -> float:
        """Linear backoff: ``base + attempt * step`` seconds (attempt is 0-based)."""
        return self.poll_base_delay + attempt * self.poll_step

    async def _poll_task(self, task_id: str) -> list[dict[str, Any]]:
        endpoint = f"{DATAFORSEO_ENDPOINTS['search_volume_task_get']}/{task_id}"
        for attempt in range(self.poll_attempts):
            await asyncio.sleep(self.poll_delay(attempt))
            try:
                body = await self._request("GET", endpoint)
            except ProviderError as e:
                if e.status_code in TASK_PENDING_CODES:
                    logger.info("Task not ready", extra={"task_id": task_id, "attempt": attempt + 1})
                    continue
                if attempt == self.poll_attempts - 1 or not e.is_retryable():
                    raise
                logger.warning(
                    "Task poll failed, retrying",
                    extra={"task_id": task_id, "attempt": attempt + 1, "error": e.message},
                )
                continue

            polled = self._first_task(body)
            if polled is not None and polled.get("status_code") == STATUS_OK and polled.get("result") is not None:
                return self._result_list(polled["result"])
            logger.info(
                "Task not ready",
                extra={"task_id": task_id, "attempt": attempt + 1, "max_attempts": self.poll_attempts},
            )

        raise TaskTimeoutError(
            f"Search volume task {task_id} not ready after {self.poll_attempts} attempts",
            PROVIDER,
            task_id=task_id,
            attempts=self.poll_attempts,
        )

    @staticmethod
    def _first_task(body: dict[str, Any]) -> dict[str, Any] | None:
        tasks = body.get("tasks") or []
        if not isinstance(tasks, list) or (tasks and not isinstance(tasks[0], dict)):
            raise ProviderError("DataForSEO API Error: malformed tasks payload", PROVIDER)
        return tasks[0] if tasks else None

    @staticmethod
    def _result_list(result: Any) -> list[Any]:
        if not isinstance(result, list):
            raise ProviderError("DataForSEO API Error: malformed result payload", PROVIDER)
        return result

    @classmethod
    def _first_task_result(cls, body: dict[str, Any], allow_empty: bool = False) -> list[Any]:
        task = cls._first_task(body)
        if task is None:
            raise NoResultsError("No task returned by DataForSEO", PROVIDER)
        task_status = task.get("status_code")
        if task_status is not None and task_status != STATUS_OK:
            raise ProviderError(
                f"DataForSEO task error: {task_status} - {task.get('status_message', '')}",
                PROVIDER,
                status_code=task_status,
            )
        result = task.get("result")
        if result is None:
            if allow_empty:
                return []
            raise NoResultsError("No result payload returned by DataForSEO", PROVIDER)
        return cls._result_list(result)

    @staticmethod
    def _parse_volume_item(item: Any) -> SearchVolumeRecord | None:
        """Accept both the flat layout and the ``keyword_info`` layout.

        Items that do not fit the record schema are skipped; their keyword
        falls back to the zero-filled record.
        """
        if not isinstance(item, dict) or not item.get("keyword"):
            return None
        keyword = item["keyword"]
        info = item.get("keyword_info") or item
        try:
            monthly = [
                MonthlySearch(year=m["year"], month=m["month"], volume=m.get("search_volume") or 0)
                for m in info.get("monthly_searches") or []
                if isinstance(m, dict) and m.get("year") and m.get("month")
            ]
            return SearchVolumeRecord(
                keyword=keyword,
                search_volume=info.get("search_volume") or 0,
                competition=competition_label(info),
                cpc=info.get("cpc") or 0.0,
                monthly_searches=monthly,
            )
        except PydanticValidationError as e:
            logger.warning(
                "Skipping malformed search volume item",
                extra={"keyword": str(keyword), "errors": e.error_count()},
            )
            return None

    # ------------------------------------------------------------------
    # SERP
    # ------------------------------------------------------------------

    async def get_serp_results(
        self,
        keyword: str,
        location: int,
        language: str,
        include_featured: bool = False,
    ) -> SerpResult:
        """Top organic results for ``keyword``.

        Raises:
            NoResultsError: no task or result payload
        """
        if not keyword or not keyword.strip():
            raise ValidationError("keyword is required", field="keyword")

        logger.info("Getting SERP results", extra={"keyword": keyword, "location": location, "language": language})
        task = {
            "keyword": keyword,
            "location_code": location,
            "language_code": language,
            "device": "desktop",
            "os": "windows",
            "depth": SERP_DEPTH,
            "calculate_rectangles": False,
        }
        body = await self._request("POST", DATAFORSEO_ENDPOINTS["serp"], [task])

        result = self._first_task_result(body)
        if not result:
            raise NoResultsError("No SERP results found", PROVIDER)
        page = result[0]
        if not isinstance(page, dict):
            raise ProviderError("DataForSEO API Error: malformed SERP page", PROVIDER)

        allowed = {"organic", "featured_snippet"} if include_featured else {"organic"}
        organic = [
            OrganicEntry(
                position=item.get("rank_absolute") or item.get("rank_group") or 0,
                title=item.get("title") or "",
                description=item.get("description") or "",
                url=item["url"],
                domain=item.get("domain") or "",
                breadcrumb=item.get("breadcrumb"),
                is_featured=item.get("type") == "featured_snippet" or bool(item.get("is_featured_snippet")),
            )
            for item in page.get("items") or []
            if isinstance(item, dict) and item.get("type") in allowed and item.get("url")
        ]
        organic.sort(key=lambda entry: entry.position)

        logger.info("SERP results retrieved", extra={"keyword": keyword, "organic_count": len(organic)})
        return SerpResult(keyword=keyword, total_results=page.get("se_results_count") or 0, organic_results=organic)
