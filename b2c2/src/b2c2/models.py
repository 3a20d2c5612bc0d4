"""
Unified records returned by exchange adapters, using Pydantic.  These
models give every venue the same balance, ticker, order book and trade
shapes, so calling code never has to know which venue it is talking to.
Values that a venue does not provide are ``None``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Market(BaseModel):
    """Static description of a tradable pair."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Venue instrument id, e.g. btc")
    symbol: str = Field(..., description="Unified symbol, e.g. ETH/AUD")
    base: str
    quote: str
    base_id: str
    quote_id: str


class BalanceEntry(BaseModel):
    free: Optional[float] = None
    used: Optional[float] = None
    total: Optional[float] = None


class Balances(BaseModel):
    """Balance table keyed by unified asset code."""

    info: Any = None
    balances: Dict[str, BalanceEntry] = Field(default_factory=dict)

    def __getitem__(self, code: str) -> BalanceEntry:
        return self.balances[code]

    def __contains__(self, code: object) -> bool:
        return code in self.balances

    @property
    def free(self) -> Dict[str, Optional[float]]:
        return {code: entry.free for code, entry in self.balances.items()}

    @property
    def used(self) -> Dict[str, Optional[float]]:
        return {code: entry.used for code, entry in self.balances.items()}

    @property
    def total(self) -> Dict[str, Optional[float]]:
        return {code: entry.total for code, entry in self.balances.items()}


class Ticker(BaseModel):
    symbol: str
    timestamp: Optional[int] = None
    datetime: Optional[str] = None
    high: Optional[float] = None
    low: Optional[float] = None
    bid: Optional[float] = None
    bid_volume: Optional[float] = None
    ask: Optional[float] = None
    ask_volume: Optional[float] = None
    vwap: Optional[float] = None
    open: Optional[float] = None
    close: Optional[float] = None
    last: Optional[float] = None
    previous_close: Optional[float] = None
    change: Optional[float] = None
    percentage: Optional[float] = None
    average: Optional[float] = None
    base_volume: Optional[float] = None
    quote_volume: Optional[float] = None
    info: Any = None


class OrderBook(BaseModel):
    """Bid/ask ladder.  Bids descend by price, asks ascend."""

    symbol: str
    bids: List[List[float]] = Field(default_factory=list)
    asks: List[List[float]] = Field(default_factory=list)
    timestamp: Optional[int] = None
    datetime: Optional[str] = None
    nonce: Optional[int] = None


class Trade(BaseModel):
    info: Any = None
    id: Optional[str] = None
    symbol: Optional[str] = None
    timestamp: Optional[int] = None
    datetime: Optional[str] = None
    order: Optional[str] = None
    type: Optional[str] = None
    side: Optional[str] = None
    taker_or_maker: Optional[str] = None
    price: Optional[float] = None
    amount: Optional[float] = None
    cost: Optional[float] = None
    fee: Optional[Dict[str, Any]] = None


class OrderRequest(BaseModel):
    """Limit order payload in the venue's field names."""

    instrument_id: str = Field(..., description="Venue instrument id, sent as cointype")
    amount: float = Field(..., gt=0, description="Order quantity in base currency")
    rate: float = Field(..., gt=0, description="Limit price")

    def to_payload(self) -> Dict[str, Any]:
        return {"cointype": self.instrument_id, "amount": self.amount, "rate": self.rate}
