"""
Stock and PriceUpdate payload types for the stock indices.

Both types are stored as the value half of (key, value) pairs, where the
value doubles as tie-breaker. Their ordering therefore encodes identity:
a Stock is ordered by stock_id, a PriceUpdate by timestamp.
"""

from dataclasses import dataclass, field
from functools import total_ordering

from ranktree.models.sortedcontainers import OrderStatisticsTree


@total_ordering
@dataclass(eq=False)
class PriceUpdate:
    """
    A single price change recorded against a stock.

    Attributes:
        timestamp: When the change happened; unique within one stock.
        price_difference: Signed amount added to the stock price.
    """

    timestamp: int
    price_difference: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PriceUpdate):
            return NotImplemented
        return self.timestamp == other.timestamp

    def __lt__(self, other: "PriceUpdate") -> bool:
        if not isinstance(other, PriceUpdate):
            return NotImplemented
        return self.timestamp < other.timestamp

    def __hash__(self) -> int:
        return hash(self.timestamp)


@total_ordering
@dataclass(eq=False)
class Stock:
    """
    A tradable instrument with a current price and its update history.

    Attributes:
        stock_id: Unique identifier; the only field used for ordering.
        price: Current price.
        timestamp: Time the stock was listed.
        updates: History of price updates keyed by timestamp.
    """

    stock_id: str
    price: float
    timestamp: int
    updates: OrderStatisticsTree = field(
        default_factory=OrderStatisticsTree, repr=False
    )

    def update_price(self, change: float) -> None:
        self.price += change

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Stock):
            return NotImplemented
        return self.stock_id == other.stock_id

    def __lt__(self, other: "Stock") -> bool:
        if not isinstance(other, Stock):
            return NotImplemented
        return self.stock_id < other.stock_id

    def __hash__(self) -> int:
        return hash(self.stock_id)

    def __str__(self) -> str:
        return self.stock_id
