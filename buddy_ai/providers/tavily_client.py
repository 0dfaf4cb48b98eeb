"""Tavily web search adapter.

- URL: {base_url}/search
- Auth: Authorization: Bearer <api_key>

Only ``results[].content`` reaches the model; title, url and score are
logged by the webSearch tool.
"""

from typing import Any, Dict, List

import httpx

from buddy_ai.domain.exceptions import ApiError, NetworkError, RateLimitError, ValidationError
from buddy_ai.providers.base import SearchResult


class TavilyClient:
    """Tavily search client."""

    name = "tavily"

    def __init__(self, settings):
        self._settings = settings

    def search(self, query: str) -> List[SearchResult]:
        if not getattr(self._settings, "tavily_api_key", None):
            raise ValidationError(code="MISSING_API_KEY", message="TAVILY_API_KEY not set")
        payload = {
            "query": query,
            "max_results": getattr(self._settings, "search_max_results", 5),
            "search_depth": getattr(self._settings, "search_depth", "basic"),
            "topic": "general",
        }
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                base = getattr(self._settings, "tavily_base_url", None) or "https://api.tavily.com"
                resp = client.post(
                    f"{base}/search",
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {self._settings.tavily_api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e))
        if resp.status_code == 429:
            raise RateLimitError(code="RATE_LIMIT", message="Tavily rate limit", http_status=429)
        if resp.status_code >= 400:
            raise ApiError(code="API_ERROR", message=resp.text, http_status=resp.status_code)
        return self._parse_results(resp.json())

    @staticmethod
    def _parse_results(data: Dict[str, Any]) -> List[SearchResult]:
        results: List[SearchResult] = []
        for item in data.get("results") or []:
            if not isinstance(item, dict):
                continue
            results.append(
                SearchResult(
                    title=item.get("title") or "",
                    url=item.get("url") or "",
                    content=item.get("content") or "",
                    score=float(item.get("score") or 0.0),
                    raw=item,
                )
            )
        return results
