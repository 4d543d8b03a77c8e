"""Cross-cutting utilities (lowest dependency layer).

No module in utils/ may import from upper layers (configs, joints, hardware).

Convenience imports:
    from motion_control.utils import fs
    from motion_control.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import logging_config

from .logging_config import get_logger, log_context, push_context, setup_logging

__all__ = [
    'fs',
    'logging_config',
    'get_logger',
    'log_context',
    'push_context',
    'setup_logging',
]
