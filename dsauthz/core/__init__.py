"""
Core module initialization
"""

from .config import Config, TokenConfig
from .service import AccessControl
from .types import *

__all__ = ["AccessControl", "Config", "TokenConfig"]
