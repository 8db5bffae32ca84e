"""Logging setup.

Modules keep using ``logging.getLogger(__name__)``. One stderr handler on the
root logger renders records either as one JSON object per line through
structlog's ``ProcessorFormatter`` (production) or as plain text
(development).
"""
import logging
import sys

import structlog

from proposal_maker.core.user_context import get_current_account_id

_HANDLER_NAME = "proposal_maker"


class AccountContextFilter(logging.Filter):
    """Attach the authenticated account id (if any) to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.account_id = get_current_account_id()
        return True


def add_account_id(logger, method_name, event_dict):
    """structlog processor adding the request's account id when one is set."""
    account_id = get_current_account_id()
    if account_id is not None:
        event_dict["account_id"] = account_id
    return event_dict


# Run for records coming from stdlib loggers before rendering
_PRE_CHAIN = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.ExtraAdder(),
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    add_account_id,
]


def json_formatter() -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_PRE_CHAIN,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure the root logger. Safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        structlog.configure(
            processors=_PRE_CHAIN + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        handler.setFormatter(json_formatter())
    else:
        handler.addFilter(AccountContextFilter())
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - [account=%(account_id)s] %(message)s")
        )
    root.addHandler(handler)
