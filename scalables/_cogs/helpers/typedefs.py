"""
Type aliases for the loggers accepted by all the API-level functions.

``logging.LoggerAdapter`` is generic only for type-checkers, not at runtime.
"""
import logging
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

# Either a plain logger or a workload-bound adapter, used the same way.
Logger = Union[logging.Logger, LoggerAdapter]
