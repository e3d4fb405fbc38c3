"""Ticker list parsing and symbol normalization."""

from __future__ import annotations

import json
from typing import Any, Iterable, List, Optional


def normalize_symbol(raw: Any) -> Optional[str]:
    """'$btc' -> 'BTC'. Returns None for non-strings and empty symbols."""
    if not isinstance(raw, str):
        return None
    symbol = raw.strip()
    if symbol.startswith("$"):
        symbol = symbol[1:]
    symbol = symbol.strip().upper()
    return symbol or None


def parse_ticker_list(raw: Optional[str]) -> Optional[List[Any]]:
    """Decode a stored ticker column. None means the value is not a JSON array."""
    if raw is None:
        return None
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(parsed, list):
        return None
    return parsed


def distinct_symbols(ticker_lists: Iterable[Iterable[Any]]) -> set[str]:
    symbols: set[str] = set()
    for tickers in ticker_lists:
        for raw in tickers:
            symbol = normalize_symbol(raw)
            if symbol:
                symbols.add(symbol)
    return symbols
