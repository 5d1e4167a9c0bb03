"""
Optional Logfire tracing for the memory store.

When ``LOGFIRE__ENABLED`` is true and a token is configured, Logfire is set
up and SQLAlchemy is instrumented so every repository query shows up as a
span. Logfire ships in the ``monitoring`` extra; without it the store runs
untraced.
"""

import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from agentmem.core.config import LogfireConfig, settings

logger = logging.getLogger(__name__)


def _instrument_sqlalchemy(logfire: Any, engine: Optional[AsyncEngine]) -> None:
    try:
        if engine is not None:
            logfire.instrument_sqlalchemy(engine=engine.sync_engine)
        else:
            # Instruments every engine created from now on
            logfire.instrument_sqlalchemy()
    except Exception as e:
        logger.warning(f"Failed to instrument SQLAlchemy: {e}")
        return
    logger.info("Logfire: SQLAlchemy instrumentation enabled")


def initialize_logfire(engine: Optional[AsyncEngine] = None, config: Optional[LogfireConfig] = None) -> bool:
    """
    Turn on Logfire tracing.

    Args:
        engine: Engine to instrument; all later engines when omitted
        config: Logfire section to use instead of ``settings.logfire``

    Returns:
        True when Logfire was configured, False when tracing stays off.
    """
    config = config or settings.logfire

    if not config.enabled:
        logger.info("Logfire tracing is disabled. Set LOGFIRE__ENABLED=true to enable it.")
        return False

    if not config.token:
        logger.warning("Logfire is enabled but LOGFIRE__TOKEN is not set; tracing stays off.")
        return False

    try:
        import logfire
    except ImportError:
        logger.warning(
            "Logfire is enabled but the 'logfire' package is not installed. "
            "Install it with: pip install 'agentmem[monitoring]'"
        )
        return False

    try:
        logfire.configure(
            token=config.token,
            service_name=config.service_name,
            service_version=config.service_version,
            environment=config.environment,
            sampling=logfire.SamplingOptions(head=config.sample_rate),
        )
    except Exception as e:
        logger.error(f"Failed to configure Logfire: {e}", exc_info=True)
        return False

    if config.trace_sqlalchemy:
        _instrument_sqlalchemy(logfire, engine)

    logger.info(f"Logfire tracing initialized: service={config.service_name}, environment={config.environment}")
    return True
