"""
Logging of the workload operations, in text or JSON formats.

Every operation logs via a :class:`WorkloadLogger`, which attaches
the workload's reference to the log records (as ``workload_ref``).
The formatters then either prefix the messages with ``[namespace/name]``,
or put the reference into a dedicated field of the JSON records, or both.

The package never configures the logging on import: it is the job of
the CLI (or of an embedding application) via :func:`configure`.
"""
import copy
import enum
import logging
from typing import Any, Dict, MutableMapping, Optional, Tuple, Type, Union

from pythonjsonlogger.core import RESERVED_ATTRS
from pythonjsonlogger.json import JsonFormatter

from scalables._cogs.helpers import typedefs

logger = logging.getLogger('scalables.workloads')

# The record's attribute with the workload reference, as set by the adapter.
REF_ATTR = 'workload_ref'

# The JSON field for the workload reference, unless overridden.
DEFAULT_JSON_REFKEY = 'object'

# The loggers too noisy outside of the debug mode.
QUIET_LOGGERS = ['asyncio']

# From the lowest: the first level not below the record's level gives the severity.
SEVERITIES: Tuple[Tuple[int, str], ...] = (
    (logging.DEBUG, 'debug'),
    (logging.INFO, 'info'),
    (logging.WARNING, 'warn'),
    (logging.ERROR, 'error'),
)


class LogFormat(enum.Enum):
    """ Predefined log formats, as accepted on CLI by their lower-cased names. """
    PLAIN = '%(message)s'
    FULL = '[%(asctime)s] %(name)-20.20s [%(levelname)-8.8s] %(message)s'
    JSON = None  # structured, not a format string


def get_severity(levelno: int) -> str:
    for threshold, severity in SEVERITIES:
        if levelno <= threshold:
            return severity
    return 'fatal'


class WorkloadFormatter(logging.Formatter):
    """ A marker of our own formatters, to recognise them on reconfiguration. """


class WorkloadTextFormatter(WorkloadFormatter):
    pass


class WorkloadJsonFormatter(WorkloadFormatter, JsonFormatter):
    """
    A JSON formatter with the workload reference as a nested object.

    The reference goes under ``refkey`` (``"object"`` by default)
    instead of the raw ``workload_ref`` attribute, and every record gets
    a ``severity`` as understood by the common log collectors.
    """

    def __init__(self, *args: Any, refkey: Optional[str] = None, **kwargs: Any) -> None:
        reserved_attrs = set(kwargs.pop('reserved_attrs', RESERVED_ATTRS)) | {REF_ATTR}
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, reserved_attrs=reserved_attrs, **kwargs)
        self.refkey: str = refkey or DEFAULT_JSON_REFKEY

    def add_fields(
            self,
            log_record: Dict[str, Any],
            record: logging.LogRecord,
            message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        ref = getattr(record, REF_ATTR, None)
        if ref is not None:
            log_record[self.refkey] = ref
        log_record.setdefault('severity', get_severity(record.levelno))


class WorkloadPrefixingMixin(WorkloadFormatter):
    """ Prefix the messages with ``[namespace/name]`` of the workload, if any. """

    def format(self, record: logging.LogRecord) -> str:
        ref = getattr(record, REF_ATTR, None)
        if ref is not None:
            path = '/'.join(part for part in [ref.get('namespace'), ref.get('name')] if part)
            record = copy.copy(record)  # the other handlers must see the original message.
            record.msg = f"[{path}] {record.msg}"
        return super().format(record)


class WorkloadPrefixingTextFormatter(WorkloadPrefixingMixin, WorkloadTextFormatter):
    pass


class WorkloadPrefixingJsonFormatter(WorkloadPrefixingMixin, WorkloadJsonFormatter):
    pass


class WorkloadLogger(typedefs.LoggerAdapter):
    """
    A logger adapter to carry the workload identifiers for formatting.

    It is constructed per operation call, as the operations keep no state.
    The per-message ``extra=`` is merged with the workload's reference
    instead of being overwritten by it (unlike the stock adapters).
    """

    def __init__(
            self,
            *,
            kind: str,
            namespace: Optional[str],
            name: str,
            base: logging.Logger = logger,
    ) -> None:
        ref = dict(kind=kind, namespace=namespace, name=name)
        super().__init__(base, {REF_ATTR: ref})

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> Tuple[str, MutableMapping[str, Any]]:
        kwargs['extra'] = {**(self.extra or {}), **kwargs.get('extra', {})}
        return msg, kwargs


class _WorkloadStreamHandler(logging.StreamHandler):  # type: ignore
    """ A marker to recognise our own handlers on reconfiguration. """


def configure(
        debug: Optional[bool] = None,
        verbose: Optional[bool] = None,
        quiet: Optional[bool] = None,
        log_format: Union[LogFormat, str] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> None:
    """
    Install our own stream handler on the root logger, replacing the previous one.

    The other handlers of the root logger (e.g. pytest's) are left intact.
    """
    level = logging.DEBUG if debug or verbose else logging.WARNING if quiet else logging.INFO
    handler = _WorkloadStreamHandler()
    handler.setFormatter(make_formatter(log_format=log_format,
                                        log_prefix=log_prefix,
                                        log_refkey=log_refkey))

    root = logging.getLogger()
    root.handlers[:] = [h for h in root.handlers if not isinstance(h, _WorkloadStreamHandler)]
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        noisy = logging.getLogger(name)
        noisy.propagate = bool(debug)
        if not debug:
            noisy.handlers[:] = [logging.NullHandler()]


def make_formatter(
        log_format: Union[LogFormat, str] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> WorkloadFormatter:
    """
    Create a formatter for a predefined or custom format.

    If the prefixing is not decided explicitly, the text formats are prefixed,
    and JSON is not (it has the reference as a separate field anyway).
    """
    if log_prefix is None:
        log_prefix = log_format is not LogFormat.JSON

    cls: Type[WorkloadFormatter]
    match log_format:
        case LogFormat.JSON:
            cls = WorkloadPrefixingJsonFormatter if log_prefix else WorkloadJsonFormatter
            return cls(refkey=log_refkey)
        case LogFormat(value=fmt) | str(fmt):
            cls = WorkloadPrefixingTextFormatter if log_prefix else WorkloadTextFormatter
            return cls(fmt)
        case _:
            raise ValueError(f"Unsupported log format: {log_format!r}")
