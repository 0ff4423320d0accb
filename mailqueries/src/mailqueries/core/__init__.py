"""Aggregation core: definitions, live results, baseline, items and refresh.

What:
  Expose the types and entry points needed to turn query definitions and
  live search counts into display-ready query items.

Why:
  Embedding applications only need the coordinator, the item record and the
  error types; the module layout behind them is free to change.

How:
  Re-export the public names from their owning submodules.

Interfaces:
  ``UpdateCoordinator``, ``CoordinatorState``, ``QueryItem``, ``QueryDefinition``,
  ``Category``, ``LiveResult``, ``QueryService``, ``ChangeNotifier``,
  ``ConfigurationError``, ``InvalidArgumentError``, ``QueryItemsError``.
"""

from .baseline import BaselineSnapshot, BaselineStore
from .cache import ItemCache
from .coordinator import CoordinatorState, UpdateCoordinator
from .definitions import Category, LiteralQuery, QueryDefinition, SupplierQuery
from .display import format_item, format_unread
from .errors import ConfigurationError, InvalidArgumentError, QueryItemsError
from .events import ChangeNotifier
from .items import ItemAggregator, QueryItem, ensure_favorite
from .normalize import normalize
from .results import LiveResult, ResultIndex, find_result
from .service import QueryService

__all__ = [
    "BaselineSnapshot",
    "BaselineStore",
    "Category",
    "ChangeNotifier",
    "ConfigurationError",
    "CoordinatorState",
    "InvalidArgumentError",
    "ItemAggregator",
    "ItemCache",
    "LiteralQuery",
    "LiveResult",
    "QueryDefinition",
    "QueryItem",
    "QueryItemsError",
    "QueryService",
    "ResultIndex",
    "SupplierQuery",
    "UpdateCoordinator",
    "ensure_favorite",
    "find_result",
    "format_item",
    "format_unread",
    "normalize",
]
