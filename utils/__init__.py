"""
Utility modules for the lead desk.
"""

from .config import Config

__all__ = ["Config"]
