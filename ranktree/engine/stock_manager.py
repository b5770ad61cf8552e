"""
StockManager - Stock bookkeeping over two order-statistics indices.
"""

import logging
import math

from ranktree.models.bounds import Bound
from ranktree.models.exceptions import InvalidStockOperationError
from ranktree.models.sortedcontainers import OrderStatisticsTree
from ranktree.models.stock import PriceUpdate, Stock

logger = logging.getLogger(__name__)


class StockManager:
    """
    Tracks stocks, their prices and price histories.

    Provides:
    - add_stock / remove_stock: List or delist a stock
    - update_stock: Apply a timestamped price change
    - remove_stock_timestamp: Revert a recorded price change
    - get_stock_price: Current price of a stock
    - get_amount_stocks_in_price_range: Count stocks in [price1, price2]
    - get_stocks_in_price_range: Stock IDs in [price1, price2] by price

    Architecture:
    - stocks: OrderStatisticsTree keyed by stock_id
    - price index: OrderStatisticsTree keyed by price, Stock as tie-breaker
    - each Stock keeps its own tree of PriceUpdates keyed by timestamp

    Not thread-safe: callers sharing a manager must serialize all calls.
    """

    def __init__(self, validate_on_write: bool = False) -> None:
        """
        Initialize the manager with empty indices.

        Args:
            validate_on_write: Run a full invariant check on both indices
                after every write. Linear cost per write; meant for
                debugging and tests.
        """
        if not isinstance(validate_on_write, bool):
            raise ValueError(
                f"validate_on_write must be a bool, got {validate_on_write!r}"
            )

        self._validate_on_write = validate_on_write
        self._stocks: OrderStatisticsTree
        self._price_index: OrderStatisticsTree
        self.init_stocks()

    def init_stocks(self) -> None:
        """Drop every stock and start with empty indices."""
        self._stocks = OrderStatisticsTree()
        self._price_index = OrderStatisticsTree()
        logger.debug("Stock indices initialized")

    def size(self) -> int:
        return self._stocks.size()

    def add_stock(self, stock_id: str, timestamp: int, price: float) -> None:
        """
        List a new stock.

        Args:
            stock_id: Unique identifier.
            timestamp: Listing time, must be >= 0.
            price: Initial price, must be > 0.

        Raises:
            InvalidStockOperationError: On invalid input or duplicate ID.
        """
        self._require_stock_id(stock_id)
        if price is None or price <= 0:
            raise InvalidStockOperationError("Initial price must be positive")
        if not math.isfinite(price):
            raise InvalidStockOperationError(
                f"Initial price must be finite, got {price}"
            )
        self._require_timestamp(timestamp)
        if self._stocks.search(stock_id) is not None:
            raise InvalidStockOperationError(f"Stock ID already exists: {stock_id}")

        stock = Stock(stock_id=stock_id, price=price, timestamp=timestamp)
        self._stocks.insert(stock_id, stock)
        self._price_index.insert(price, stock)
        logger.info(f"Added stock {stock_id} at {price}")
        self._after_write()

    def remove_stock(self, stock_id: str) -> None:
        """
        Delist a stock.

        Raises:
            InvalidStockOperationError: If the stock does not exist.
        """
        stock = self._get_stock(stock_id, "Stock does not exist, cannot remove")
        self._stocks.delete(stock_id, stock)
        self._price_index.delete(stock.price, stock)
        logger.info(f"Removed stock {stock_id}")
        self._after_write()

    def update_stock(
        self, stock_id: str, timestamp: int, price_difference: float
    ) -> None:
        """
        Apply a price change and record it in the stock's history.

        Args:
            stock_id: Stock to update.
            timestamp: Time of the change, must be >= 0 and not already
                used by another update of this stock.
            price_difference: Non-zero signed change.

        Raises:
            InvalidStockOperationError: On invalid input or unknown stock.
        """
        self._require_stock_id(stock_id)
        self._require_timestamp(timestamp)
        stock = self._get_stock(stock_id, "Cannot update a non-existent stockId")
        if price_difference is None or price_difference == 0:
            raise InvalidStockOperationError("priceDifference must be non-zero")
        if not math.isfinite(price_difference):
            raise InvalidStockOperationError(
                f"priceDifference must be finite, got {price_difference}"
            )
        self._require_finite_result(stock, price_difference)
        if stock.updates.search(timestamp) is not None:
            raise InvalidStockOperationError(
                f"Stock {stock_id} already has an update at {timestamp}"
            )

        stock.updates.insert(timestamp, PriceUpdate(timestamp, price_difference))
        self._reprice(stock, price_difference)
        logger.debug(
            f"Updated stock {stock_id} at {timestamp} by {price_difference}"
        )
        self._after_write()

    def get_stock_price(self, stock_id: str) -> float:
        """
        Return the current price of a stock.

        Raises:
            InvalidStockOperationError: If the stock does not exist.
        """
        return self._get_stock(stock_id, "Stock does not exist").price

    def remove_stock_timestamp(self, stock_id: str, timestamp: int) -> None:
        """
        Revert the price change recorded at timestamp and forget it.

        Raises:
            InvalidStockOperationError: If the stock or the update does not exist.
        """
        self._require_stock_id(stock_id)
        self._require_timestamp(timestamp)
        stock = self._get_stock(stock_id, "Stock does not exist")
        update = stock.updates.search(timestamp)
        if update is None:
            raise InvalidStockOperationError("Update does not exist")
        self._require_finite_result(stock, -update.price_difference)

        stock.updates.delete(timestamp, update)
        self._reprice(stock, -update.price_difference)
        logger.debug(f"Reverted update of stock {stock_id} at {timestamp}")
        self._after_write()

    def get_amount_stocks_in_price_range(self, price1: float, price2: float) -> int:
        """
        Count stocks whose price lies in [price1, price2].

        Raises:
            InvalidStockOperationError: If a bound is missing or NaN.
        """
        self._require_price_range(price1, price2)
        return self._price_index.count_in_range(
            price1, price2, Bound.LOWEST, Bound.HIGHEST
        )

    def get_stocks_in_price_range(self, price1: float, price2: float) -> list[str]:
        """
        List IDs of stocks whose price lies in [price1, price2], ordered by
        price and then by ID.

        Raises:
            InvalidStockOperationError: If a bound is missing or NaN.
        """
        count = self.get_amount_stocks_in_price_range(price1, price2)
        if count == 0:
            return []
        return self._price_index.get_nodes_in_range(
            price1, price2, Bound.LOWEST, Bound.HIGHEST, count
        )

    def check_invariants(self) -> None:
        """Verify both indices. Raises TreeInvariantError on corruption."""
        self._stocks.check_invariants()
        self._price_index.check_invariants()

    def _reprice(self, stock: Stock, change: float) -> None:
        """Move a stock to its new position in the price index."""
        self._price_index.delete(stock.price, stock)
        stock.update_price(change)
        self._price_index.insert(stock.price, stock)

    def _get_stock(self, stock_id: str, missing_message: str) -> Stock:
        self._require_stock_id(stock_id)
        stock = self._stocks.search(stock_id)
        if stock is None:
            raise InvalidStockOperationError(missing_message)
        return stock

    def _after_write(self) -> None:
        if self._validate_on_write:
            self.check_invariants()

    @staticmethod
    def _require_finite_result(stock: Stock, change: float) -> None:
        new_price = stock.price + change
        if not math.isfinite(new_price):
            raise InvalidStockOperationError(
                f"Price of {stock.stock_id} would become {new_price}"
            )

    @staticmethod
    def _require_stock_id(stock_id: str) -> None:
        if stock_id is None:
            raise InvalidStockOperationError("Stock id cannot be null")
        if not isinstance(stock_id, str):
            raise InvalidStockOperationError(
                f"Stock id must be a string, got {type(stock_id).__name__}"
            )

    @staticmethod
    def _require_timestamp(timestamp: int) -> None:
        if timestamp is None or timestamp < 0:
            raise InvalidStockOperationError("Timestamp must be positive")

    @staticmethod
    def _require_price_range(price1: float, price2: float) -> None:
        if price1 is None or price2 is None:
            raise InvalidStockOperationError("Price range cannot be null")
        if math.isnan(price1) or math.isnan(price2):
            raise InvalidStockOperationError("Price range cannot be NaN")
