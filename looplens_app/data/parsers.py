"""
Market feed parsers for converting raw payloads to normalized objects.

This module handles parsing of CoinGecko price and trending payloads and
the alternative.me fear & greed payload into canonical data structures
with proper type conversion and error handling.
"""

import math
from typing import Any, Mapping, Union

import orjson

from ..errors import MalformedDataError
from .models import AssetQuote


def parse_json_payload(raw_data: Union[str, bytes]) -> Any:
    """
    Parse a raw JSON body.

    Args:
        raw_data: Raw response body

    Returns:
        Parsed JSON value

    Raises:
        MalformedDataError: If JSON parsing fails
    """
    try:
        return orjson.loads(raw_data)
    except orjson.JSONDecodeError as e:
        preview = raw_data[:200] if isinstance(raw_data, str) else raw_data[:200].decode("utf-8", "replace")
        raise MalformedDataError(
            f"Invalid JSON: {e}",
            raw_data=preview,
            expected_format="json"
        )


def _to_number(value: Any, field_name: str) -> float:
    """Coerce a feed value to float; missing values count as zero."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise MalformedDataError(f"Invalid {field_name}: {value!r}", expected_format="number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedDataError(f"Invalid {field_name}: {value!r}", expected_format="number")
    if not math.isfinite(number):
        raise MalformedDataError(f"Non-finite {field_name}: {value!r}", expected_format="number")
    return number


def parse_price_payload(
    payload: Any,
    assets: Mapping[str, str],
    vs_currency: str = "usd"
) -> tuple[AssetQuote, ...]:
    """
    Parse a CoinGecko ``simple/price`` response.

    Assets are returned in the order of ``assets``. Entries that are
    missing or have no positive price are dropped.

    Args:
        payload: Parsed response body
        assets: Feed id to ticker mapping
        vs_currency: Quote currency key

    Returns:
        Tuple of normalized quotes

    Raises:
        MalformedDataError: If the payload or a numeric field is malformed
    """
    if not isinstance(payload, dict):
        raise MalformedDataError(
            "Price payload must be an object",
            raw_data=str(payload)[:200],
            expected_format="{id: {usd: ...}}"
        )

    quotes = []
    for feed_id, symbol in assets.items():
        data = payload.get(feed_id)
        if data is None:
            continue
        if not isinstance(data, dict):
            raise MalformedDataError(
                f"Price entry for {feed_id} must be an object",
                raw_data=str(data)[:200]
            )

        price = _to_number(data.get(vs_currency), "price")
        if price <= 0:
            continue

        quotes.append(AssetQuote(
            symbol=symbol.upper(),
            price=price,
            change24h=_to_number(data.get(f"{vs_currency}_24h_change"), "24h change"),
            volume24h=max(_to_number(data.get(f"{vs_currency}_24h_vol"), "24h volume"), 0.0),
            market_cap=max(_to_number(data.get(f"{vs_currency}_market_cap"), "market cap"), 0.0),
        ))

    return tuple(quotes)


def parse_fear_greed_payload(payload: Any) -> int:
    """
    Parse an alternative.me ``fng`` response into an index value.

    Raises:
        MalformedDataError: If the index is missing or out of range
    """
    try:
        raw_value = payload["data"][0]["value"]
        index = int(raw_value)
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise MalformedDataError(
            f"Invalid fear & greed payload: {e}",
            raw_data=str(payload)[:200],
            expected_format="{data: [{value: ...}]}"
        )

    if not 0 <= index <= 100:
        raise MalformedDataError(f"Fear & greed index out of range: {index}")

    return index


def parse_trending_payload(payload: Any, limit: int = 5) -> tuple[str, ...]:
    """
    Parse a CoinGecko ``search/trending`` response into asset names.

    Raises:
        MalformedDataError: If the coin list is missing or malformed
    """
    try:
        coins = payload["coins"][:limit]
        names = tuple(str(coin["item"]["name"]) for coin in coins)
    except (KeyError, TypeError) as e:
        raise MalformedDataError(
            f"Invalid trending payload: {e}",
            raw_data=str(payload)[:200],
            expected_format="{coins: [{item: {name: ...}}]}"
        )

    if not names:
        raise MalformedDataError("Trending payload contains no coins")

    return names
