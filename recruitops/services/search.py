"""
External full-text search collaborator (Brave Search web API).
"""
import os
from typing import List, Optional

import requests
from dotenv import load_dotenv

from recruitops.models.models import Platform, SearchResult
from recruitops.utils.exceptions import ExternalServiceError, RateLimitError
from recruitops.utils.logging_config import get_logger

load_dotenv()
logger = get_logger(__name__)

BRAVE_SEARCH_URL = os.getenv("BRAVE_SEARCH_URL", "https://api.search.brave.com/res/v1/web/search")
SEARCH_RESULTS_PER_QUERY = int(os.getenv("SEARCH_RESULTS_PER_QUERY", "10"))
SEARCH_TIMEOUT = float(os.getenv("SEARCH_TIMEOUT", "10"))


def build_query(platform: Platform, terms: List[str]) -> str:
    return f"site:{platform.site} " + " ".join(terms)


class BraveSearchClient:
    """Blocking client; the sourcing pipeline runs it in worker threads."""

    service_name = "brave_search"

    def __init__(self, api_key: Optional[str] = None, base_url: str = BRAVE_SEARCH_URL,
                 count: int = SEARCH_RESULTS_PER_QUERY, timeout: float = SEARCH_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key if api_key is not None else os.getenv("BRAVE_SEARCH_API_KEY", "")
        self.base_url = base_url
        self.count = count
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def search(self, query: str) -> List[SearchResult]:
        try:
            resp = self.session.get(
                self.base_url,
                params={"q": query, "count": self.count, "search_lang": "en"},
                headers={
                    "Accept": "application/json",
                    "Accept-Encoding": "gzip",
                    "X-Subscription-Token": self.api_key,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ExternalServiceError(
                f"Search request failed: {e}", service_name=self.service_name, cause=e
            ) from e

        if resp.status_code == 429:
            raise RateLimitError("Search provider rate limit reached", service_name=self.service_name)
        if not resp.ok:
            raise ExternalServiceError(
                f"Search returned HTTP {resp.status_code}",
                service_name=self.service_name,
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ExternalServiceError(
                "Search returned a non-JSON body", service_name=self.service_name, cause=e
            ) from e

        results = ((data or {}).get("web") or {}).get("results") or []
        logger.debug(f"Search '{query}' returned {len(results)} results")
        return [
            SearchResult(
                title=r.get("title") or "",
                url=r.get("url") or "",
                description=r.get("description") or "",
            )
            for r in results
            if isinstance(r, dict)
        ]
