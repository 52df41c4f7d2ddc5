"""
Market data fetcher.

Reads the price feed, the fear & greed index and the trending list, and
assembles a SignalSnapshot. No feed failure ever leaves this module: the
price feed falls back to a static snapshot, the optional signals fall back
to neutral defaults.
"""

from datetime import datetime
from typing import Any, Callable, Optional

import httpx
import structlog

from ..config.defaults import MarketDataParams, SentimentParams
from ..errors import DataQualityError, DataUnavailableError, SentimentUnavailableError
from ..logging.config import log_stage_failure
from ..metrics.sentiment import derive_sentiment
from ..utils.time import local_now
from .models import (
    FALLBACK_QUOTES,
    FALLBACK_TRENDING,
    AssetQuote,
    SignalSnapshot,
    SnapshotSource,
)
from .parsers import (
    parse_fear_greed_payload,
    parse_json_payload,
    parse_price_payload,
    parse_trending_payload,
)

logger = structlog.get_logger(__name__)


class MarketDataFetcher:
    """Builds one SignalSnapshot per pipeline run from the market feeds."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        params: Optional[MarketDataParams] = None,
        sentiment_params: Optional[SentimentParams] = None,
        clock: Callable[[], datetime] = local_now
    ) -> None:
        self.client = client
        self.params = params or MarketDataParams()
        self.sentiment_params = sentiment_params or SentimentParams()
        self.clock = clock
        self.logger = logger

    async def _get_json(self, url: str, source: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET a JSON document, mapping transport and status failures."""
        try:
            response = await self.client.get(url, params=params, timeout=self.params.timeout_seconds)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DataUnavailableError(
                f"{source} returned HTTP {e.response.status_code}",
                source=source,
                status_code=e.response.status_code,
                context={"url": url}
            )
        except httpx.HTTPError as e:
            raise DataUnavailableError(
                f"{source} request failed: {e!r}",
                source=source,
                context={"url": url}
            )

        return parse_json_payload(response.content)

    async def get_crypto_prices(self) -> tuple[tuple[AssetQuote, ...], SnapshotSource]:
        """
        Fetch current prices for the configured assets.

        Returns:
            Tuple of (quotes, source); the static fallback quotes when the
            feed is unavailable or yields no usable asset
        """
        request_params = {
            "ids": ",".join(self.params.assets),
            "vs_currencies": self.params.vs_currency,
            "include_24hr_change": "true",
            "include_24hr_vol": "true",
            "include_market_cap": "true",
        }

        try:
            payload = await self._get_json(self.params.prices_url, "prices", request_params)
            quotes = parse_price_payload(payload, self.params.assets, self.params.vs_currency)
            if not quotes:
                raise DataUnavailableError(
                    "Price feed returned no usable assets",
                    source="prices",
                    context={"requested": list(self.params.assets)}
                )
        except DataQualityError as e:
            log_stage_failure(
                self.logger,
                stage="fetch_prices",
                error=e,
                recovered=True,
                context={"url": self.params.prices_url, "fallback": "static_snapshot"}
            )
            return FALLBACK_QUOTES, SnapshotSource.FALLBACK

        self.logger.info(
            "Fetched crypto prices",
            asset_count=len(quotes),
            symbols=[q.symbol for q in quotes]
        )
        return quotes, SnapshotSource.LIVE

    async def get_fear_greed_index(self) -> int:
        """Fetch the fear & greed index; neutral default on any failure."""
        try:
            payload = await self._get_json(self.params.fear_greed_url, "fear_greed")
            index = parse_fear_greed_payload(payload)
        except DataQualityError as e:
            log_stage_failure(
                self.logger,
                stage="fetch_fear_greed",
                error=SentimentUnavailableError(str(e), indicator="fear_greed"),
                recovered=True,
                context={"default": self.sentiment_params.neutral_fear_greed}
            )
            return self.sentiment_params.neutral_fear_greed

        self.logger.info("Fetched fear & greed index", fear_greed_index=index)
        return index

    async def get_trending_coins(self) -> tuple[str, ...]:
        """Fetch trending asset names; static list on any failure."""
        try:
            payload = await self._get_json(self.params.trending_url, "trending")
            trending = parse_trending_payload(payload, self.params.trending_limit)
        except DataQualityError as e:
            log_stage_failure(
                self.logger,
                stage="fetch_trending",
                error=SentimentUnavailableError(str(e), indicator="trending"),
                recovered=True,
                context={"default": list(FALLBACK_TRENDING)}
            )
            return FALLBACK_TRENDING

        self.logger.info("Fetched trending coins", trending=list(trending))
        return trending

    async def fetch_snapshot(self) -> SignalSnapshot:
        """
        Read all feeds once and assemble an immutable snapshot.

        Feeds are read one after another; sentiment is derived from the
        same price read that the snapshot carries.
        """
        fetched_at = self.clock()
        quotes, source = await self.get_crypto_prices()
        fear_greed = await self.get_fear_greed_index()
        trending = await self.get_trending_coins()

        by_symbol = {quote.symbol: quote for quote in quotes}
        sentiment = derive_sentiment(by_symbol.get("BTC"), by_symbol.get("ETH"), self.sentiment_params)

        return SignalSnapshot(
            quotes=quotes,
            sentiment=sentiment,
            fetched_at=fetched_at,
            fear_greed_index=fear_greed,
            trending=trending,
            source=source,
        )
