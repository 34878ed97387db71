"""
HTTP adapters for third-party token metadata.

CoinGeckoClient implements MetadataLookup (coin symbol by CoinGecko id)
and IconLookup (content type of a token icon URL).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from its_registry.core import config
from its_registry.core.lookup_ports import ExternalMetadata
from its_registry.core.registry_exceptions import LookupFailure

logger = logging.getLogger(__name__)


class CoinGeckoClient:
    """CoinGecko v3 API client with a shared requests session."""

    API_KEY_HEADER = "x-cg-demo-api-key"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ):
        self.base_url = (base_url or config.COINGECKO_API_URL).rstrip("/")
        self.timeout = timeout or config.get_http_timeout()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "its-registry-validator/1.0"})
        key = config.COINGECKO_API_KEY if api_key is None else api_key
        if key:
            self.session.headers[self.API_KEY_HEADER] = key

    def _http_get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        try:
            return self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise LookupFailure(f"Request to {url} failed: {exc}", details={"url": url}) from exc

    def fetch_external_metadata(self, external_id: str) -> ExternalMetadata | None:
        url = f"{self.base_url}/coins/{external_id}"
        response = self._http_get(
            url,
            params={
                "localization": "false",
                "tickers": "false",
                "market_data": "false",
                "community_data": "false",
                "developer_data": "false",
            },
        )
        if response.status_code == 404:
            logger.info("CoinGecko id not found", extra={"coingecko_id": external_id})
            return None
        if response.status_code != 200:
            raise LookupFailure(
                f"CoinGecko API returned status {response.status_code} for {external_id}",
                details={"status": response.status_code},
            )
        try:
            data = response.json()
            symbol = data["symbol"]
        except (ValueError, KeyError, TypeError) as exc:
            raise LookupFailure(f"Malformed CoinGecko response for {external_id}: {exc}") from exc
        if not isinstance(symbol, str):
            raise LookupFailure(f"Malformed CoinGecko response for {external_id}: symbol is not a string")
        return ExternalMetadata(external_id=external_id, symbol=symbol, name=data.get("name"))

    def fetch_content_type(self, url: str) -> str:
        response = self._http_get(url)
        if response.status_code != 200:
            raise LookupFailure(
                f"GET {url} returned status {response.status_code}",
                details={"status": response.status_code},
            )
        return response.headers.get("content-type", "")
