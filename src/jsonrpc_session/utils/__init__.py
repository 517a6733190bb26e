"""Utility modules for jsonrpc-session.

This package contains helpers used across the session implementation,
such as log sanitization.
"""

__all__: list[str] = []
