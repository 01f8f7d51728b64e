"""Core configuration"""

from .config import ClientConfig

__all__ = ["ClientConfig"]
