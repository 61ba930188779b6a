import logging
from typing import Any, Dict, Optional

import structlog
from structlog.stdlib import add_log_level, add_logger_name

DEFAULT_LEVEL = logging.INFO


def setup_logging(level: int = DEFAULT_LEVEL, colors: bool = True, final: bool = True) -> None:
    """Configure structlog on top of stdlib logging at ``level``.

    A non-final call is a bootstrap configuration used while the settings
    file is still being read. Loggers are only cached once the final level
    is known, so a later call can still change it.
    """
    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger().setLevel(level)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_logger_name,
            add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=final,
    )


def level_from_name(name: Optional[str], default: int = DEFAULT_LEVEL) -> int:
    """Translate a level name such as ``"debug"`` into a logging constant."""
    if not name:
        return default
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default


def resolve_level(
    settings: Dict[str, Any],
    cli_level: Optional[str] = None,
    verbose: bool = False,
) -> int:
    """Pick the effective level: ``-v`` beats ``--log-level`` beats settings."""
    if verbose:
        return logging.DEBUG
    if cli_level:
        return level_from_name(cli_level)
    return level_from_name(settings.get("logging", {}).get("level"))
