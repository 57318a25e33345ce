"""Competitor page fetching and main-content extraction.

Each URL is fetched independently; any failure becomes a placeholder entry
so one bad page never fails the batch.
"""

import asyncio
import logging
from ipaddress import ip_address, ip_network
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from .schemas import CompetitorContent, CompetitorFetchBatch

logger = logging.getLogger(__name__)

PLACEHOLDER_CONTENT = "Unable to fetch content from this source."

DEFAULT_LIMIT = 3
DEFAULT_TIMEOUT = 10.0
DEFAULT_STAGGER_SECONDS = 1.0
DEFAULT_MAX_CHARS = 3000
DEFAULT_MIN_CHARS = 100
MAX_CONTENT_LENGTH = 5 * 1024 * 1024  # 5MB
MAX_REDIRECTS = 5

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

# Elements that never carry article text
STRIP_TAGS = ["script", "style", "noscript", "nav", "footer", "header", "aside", "iframe", "svg", "form"]

MAIN_CONTENT_SELECTORS = ["main", "article", ".content", "#content", "[role=main]"]

BLOCKED_HOSTS = frozenset(
    [
        "localhost",
        "0.0.0.0",
        "169.254.169.254",  # cloud metadata service
        "169.254.170.2",  # ECS task metadata
        "metadata.google.internal",
        "metadata.goog",
    ]
)

BLOCKED_NETWORKS = [
    ip_network("10.0.0.0/8"),
    ip_network("172.16.0.0/12"),
    ip_network("192.168.0.0/16"),
    ip_network("127.0.0.0/8"),
    ip_network("169.254.0.0/16"),
    ip_network("::1/128"),
    ip_network("fc00::/7"),
    ip_network("fe80::/10"),
]

ALLOWED_SCHEMES = frozenset(["http", "https"])


class UnsafeURLError(Exception):
    """A fetch target (or redirect hop) failed the URL safety check."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Unsafe URL {url}: {reason}")
        self.url = url
        self.reason = reason


def is_safe_url(url: str) -> tuple[bool, str]:
    """Literal URL safety check (no DNS resolution).

    Returns:
        (is_safe, reason)
    """
    parsed = urlparse(url)
    if parsed.scheme not in ALLOWED_SCHEMES:
        return False, f"Invalid scheme: {parsed.scheme}"

    host = parsed.hostname
    if not host:
        return False, "Missing hostname"
    if host.lower() in BLOCKED_HOSTS:
        return False, f"Blocked host: {host}"

    try:
        ip = ip_address(host)
    except ValueError:
        return True, ""
    for network in BLOCKED_NETWORKS:
        if ip in network:
            return False, f"Blocked network: {network}"
    return True, ""


def domain_of(url: str) -> str:
    """Hostname without a leading ``www.``."""
    host = urlparse(url).hostname or ""
    return host.lower().removeprefix("www.")


def extract_page_content(html: str, max_chars: int = DEFAULT_MAX_CHARS) -> tuple[str, str, str]:
    """Extract ``(title, meta_description, content)`` from an HTML page.

    Content is the longest of the main-content candidates (falling back to
    ``<body>``), whitespace-collapsed and truncated to ``max_chars``.
    """
    soup = BeautifulSoup(html, "html.parser")

    title = soup.title.get_text(strip=True) if soup.title else ""
    meta = soup.find("meta", attrs={"name": "description"})
    meta_description = (meta.get("content") or "").strip() if meta else ""

    for tag in soup(STRIP_TAGS):
        tag.decompose()

    if not title:
        h1 = soup.find("h1")
        title = h1.get_text(strip=True) if h1 else ""

    main_content = ""
    for selector in MAIN_CONTENT_SELECTORS:
        for element in soup.select(selector):
            text = element.get_text(" ")
            if len(text) > len(main_content):
                main_content = text

    if not main_content.strip():
        body = soup.body or soup
        main_content = body.get_text(" ")

    content = " ".join(main_content.split())[:max_chars]
    return title, meta_description, content


class CompetitorContentFetcher:
    """Fetch and extract competitor pages.

    Args:
        timeout: per-URL timeout in seconds
        stagger: delay multiplier; URL ``i`` starts after ``i * stagger`` seconds
        max_chars: content truncation budget
        min_chars: entries shorter than this are not usable
        transport: httpx transport override (tests)
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        stagger: float = DEFAULT_STAGGER_SECONDS,
        max_chars: int = DEFAULT_MAX_CHARS,
        min_chars: int = DEFAULT_MIN_CHARS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.stagger = stagger
        self.max_chars = max_chars
        self.min_chars = min_chars
        self._transport = transport

    async def fetch_many(self, urls: list[str], limit: int = DEFAULT_LIMIT) -> CompetitorFetchBatch:
        """Fetch the first ``limit`` URLs concurrently.

        Completes once every URL has either content or a placeholder.
        """
        targets = urls[:limit]
        logger.info("Fetching competitor content", extra={"url_count": len(urls), "limit": limit})

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=False,
            transport=self._transport,
            headers={"User-Agent": USER_AGENT, "Accept": "text/html,application/xhtml+xml"},
        ) as client:
            entries = await asyncio.gather(
                *(self._fetch_one(client, url, index) for index, url in enumerate(targets))
            )

        batch = CompetitorFetchBatch(requested=len(targets), entries=list(entries), min_chars=self.min_chars)
        logger.info(
            "Competitor content fetched",
            extra={
                "attempted": batch.requested,
                "failed": batch.failed,
                "usable": len(batch.usable),
            },
        )
        return batch

    async def _fetch_one(self, client: httpx.AsyncClient, url: str, index: int) -> CompetitorContent:
        if index and self.stagger:
            await asyncio.sleep(index * self.stagger)

        try:
            html = await asyncio.wait_for(self._download(client, url), timeout=self.timeout)
            title, meta_description, content = extract_page_content(html, self.max_chars)
        except UnsafeURLError as e:
            logger.warning("Competitor URL blocked", extra={"url": e.url, "reason": e.reason})
            return self._placeholder(url)
        except TimeoutError:
            logger.warning("Competitor fetch timed out", extra={"url": url, "timeout": self.timeout})
            return self._placeholder(url)
        except (httpx.HTTPError, ValueError, LookupError) as e:
            logger.warning("Failed to fetch competitor content", extra={"url": url, "error": str(e)})
            return self._placeholder(url)

        return CompetitorContent(
            url=url,
            domain=domain_of(url),
            title=title,
            meta_description=meta_description,
            content=content,
            content_length=len(content),
        )

    async def _download(self, client: httpx.AsyncClient, url: str) -> str:
        """GET ``url`` following redirects by hand so every hop is checked."""
        current = url
        for _ in range(MAX_REDIRECTS + 1):
            safe, reason = is_safe_url(current)
            if not safe:
                raise UnsafeURLError(current, reason)

            async with client.stream("GET", current) as response:
                if response.is_redirect:
                    location = response.headers.get("location")
                    if not location:
                        raise ValueError(f"Redirect without location from {current}")
                    current = str(response.url.join(location))
                    continue

                response.raise_for_status()
                chunks = []
                total = 0
                async for chunk in response.aiter_bytes():
                    total += len(chunk)
                    if total > MAX_CONTENT_LENGTH:
                        raise ValueError(f"Content too large (>{MAX_CONTENT_LENGTH} bytes)")
                    chunks.append(chunk)
                encoding = response.encoding or "utf-8"
            return b"".join(chunks).decode(encoding, errors="replace")

        raise ValueError(f"Too many redirects (>{MAX_REDIRECTS})")

    @staticmethod
    def _placeholder(url: str) -> CompetitorContent:
        return CompetitorContent(
            url=url,
            domain=domain_of(url),
            content=PLACEHOLDER_CONTENT,
            content_length=0,
        )
