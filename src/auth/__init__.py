"""
Authentication package.
"""

from .tokens import TokenResult, TokenService

__all__ = [
    "TokenResult",
    "TokenService",
]
