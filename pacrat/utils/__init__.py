# pacrat/utils/__init__.py
"""
Utility modules and helper functions
"""

from .crypto import FileHasher
from .logging_config import get_logger

__all__ = ['FileHasher', 'get_logger']
