"""camelCase → snake_case registry for the shared API surface."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

_ALL_CAPS = re.compile(r"^[A-Z0-9_]+$")
_LOWER_UPPER = re.compile(r"[a-z0-9][A-Z]")
_ACRONYM_TAIL = re.compile(r"[A-Z0-9][A-Z0-9][a-z][^$]")
_TRAILING_DIGIT = re.compile(r"[a-z][0-9]$")

# Helpers every target base class implements under the snake_case spelling.
API_METHODS: Tuple[str, ...] = (
    "deepExtend",
    "safeFloat2",
    "safeInteger2",
    "safeIntegerProduct2",
    "safeTimestamp2",
    "safeString2",
    "safeStringLower2",
    "safeStringUpper2",
    "safeValue2",
    "safeFloat",
    "safeInteger",
    "safeIntegerProduct",
    "safeTimestamp",
    "safeString",
    "safeStringLower",
    "safeStringUpper",
    "safeValue",
    "safeCurrencyCode",
    "inArray",
    "toArray",
    "isEmpty",
    "arrayConcat",
    "binaryConcat",
    "binaryConcatArray",
    "binaryToString",
    "base16ToBinary",
    "precisionFromString",
    "implodeParams",
    "extractParams",
    "parseBalance",
    "parseOHLCVs",
    "parseOHLCV",
    "parseDate",
    "parseLedgerEntry",
    "parseLedger",
    "parseTicker",
    "parseTimeframe",
    "parseTradesData",
    "parseTrades",
    "parseTrade",
    "parseTradingViewOHLCV",
    "parseTransaction",
    "parseTransactions",
    "parseOrderBook",
    "parseBidsAsks",
    "parseBidAsk",
    "parseOrders",
    "parseOrderStatus",
    "parseOrder",
    "parseJson",
    "filterByArray",
    "filterBySymbolSinceLimit",
    "filterBySinceLimit",
    "filterBySymbol",
    "filterBy",
    "getVersionString",
    "indexBy",
    "sortBy",
    "groupBy",
    "findMarket",
    "findSymbol",
    "marketIds",
    "marketId",
    "fetchFundingFees",
    "fetchTradingFees",
    "fetchTradingFee",
    "fetchFees",
    "fetchL2OrderBook",
    "fetchOrderBook",
    "fetchMyTrades",
    "fetchOrderStatus",
    "fetchOpenOrders",
    "fetchOpenOrder",
    "fetchOrders",
    "fetchOrderTrades",
    "fetchOrder",
    "fetchBidsAsks",
    "fetchTickers",
    "fetchTicker",
    "fetchCurrencies",
    "fetchMarkets",
    "fetchCategories",
    "numberToString",
    "decimalToPrecision",
    "priceToPrecision",
    "amountToPrecision",
    "amountToLots",
    "feeToPrecision",
    "currencyToPrecision",
    "costToPrecision",
    "commonCurrencyCode",
    "loadAccounts",
    "loadFees",
    "loadMarkets",
    "appendInactiveMarkets",
    "calculateFee",
    "editLimitBuyOrder",
    "editLimitSellOrder",
    "editLimitOrder",
    "editOrder",
    "encodeURIComponent",
    "throwExceptionOnError",
    "handleErrors",
    "checkRequiredCredentials",
    "checkRequiredDependencies",
    "checkAddress",
    "convertTradingViewToOHLCV",
    "convertOHLCVToTradingView",
    "signBodyWithSecret",
    "isJsonEncodedObject",
    "setSandboxMode",
    "roundTimeframe",
    "integerDivide",
    "integerModulo",
    "integerPow",
)


def un_camel_case(name: str) -> str:
    """Convert ``fetchL2OrderBook`` style names to ``fetch_l2_order_book``.

    Names that are already all caps (constants) are returned untouched, and
    acronyms stay glued together: ``parseOHLCVs`` → ``parse_ohlcvs``,
    ``convertOHLCVToTradingView`` → ``convert_ohlcv_to_trading_view``.
    """
    if _ALL_CAPS.match(name):
        return name
    result = _LOWER_UPPER.sub(lambda m: f"{m.group(0)[0]}_{m.group(0)[1]}", name)
    result = _ACRONYM_TAIL.sub(lambda m: f"{m.group(0)[0]}_{m.group(0)[1:]}", result)
    result = _TRAILING_DIGIT.sub(lambda m: f"{m.group(0)[0]}_{m.group(0)[1]}", result)
    return result.lower()


@dataclass(frozen=True)
class IdentifierRegistry:
    """Immutable set of names renamed at call sites in every target.

    A rename fires only where the name is the target of a member call
    (``receiver.name (``); bare identifiers and longer names that merely
    share a prefix are left alone.
    """

    names: Tuple[str, ...] = API_METHODS
    _mapping: Dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        mapping: Dict[str, str] = {}
        for name in self.names:
            mapping.setdefault(name, un_camel_case(name))
        object.__setattr__(self, "_mapping", mapping)

    @property
    def mapping(self) -> Dict[str, str]:
        return dict(self._mapping)

    def snake(self, name: str) -> str:
        return self._mapping.get(name, un_camel_case(name))

    def extended(self, names: Iterable[str]) -> "IdentifierRegistry":
        """Return a registry that also covers ``names`` (e.g. a class's own methods)."""
        merged: List[str] = list(self.names)
        seen = set(merged)
        for name in names:
            if name not in seen:
                merged.append(name)
                seen.add(name)
        return IdentifierRegistry(tuple(merged))

    def rename_calls(self, text: str, accessor: str, *, spacing: str = "") -> str:
        """Rename ``<accessor>name (`` call sites in already rendered target text.

        ``accessor`` is the target's member access prefix (``self.`` or
        ``this->``); ``spacing`` is emitted between the new name and ``(``.
        """
        if not self._mapping:
            return text
        alternatives = "|".join(
            re.escape(name) for name in sorted(self._mapping, key=len, reverse=True)
        )
        pattern = re.compile(rf"{re.escape(accessor)}({alternatives})\s*\(")
        return pattern.sub(
            lambda m: f"{accessor}{self._mapping[m.group(1)]}{spacing}(",
            text,
        )


DEFAULT_REGISTRY = IdentifierRegistry()


__all__ = ["API_METHODS", "DEFAULT_REGISTRY", "IdentifierRegistry", "un_camel_case"]
