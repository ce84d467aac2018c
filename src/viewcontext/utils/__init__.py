"""viewcontext utility modules.

- logging: human/JSON log output and structured log fields
"""

from viewcontext.utils.logging import LogMode, log_structured, setup_logging

__all__ = [
    "LogMode",
    "log_structured",
    "setup_logging",
]
