"""
Core building blocks shared by the memory store.

Settings, logging setup, optional Logfire tracing and the error taxonomy live
here; the persistence layer itself is ``agentmem.core.database``.
"""

from agentmem.core.logging_config import get_logger, setup_logging
from agentmem.core.monitoring import initialize_logfire

__all__ = ["get_logger", "initialize_logfire", "setup_logging"]
