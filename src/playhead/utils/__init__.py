"""
Shared utilities (logging).
"""
from .message import Log

__all__ = ['Log']
