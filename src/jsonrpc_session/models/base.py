"""Shared pydantic configuration for options and JSON-RPC 2.0 messages.

Session options are swapped on a live session while other threads are
mid-call, and parsed responses are handed to callers as-is, so every model
here is immutable and rejects members it does not declare.
"""

from pydantic import BaseModel, ConfigDict


class SessionBaseModel(BaseModel):
    """Frozen, closed pydantic model used by every jsonrpc-session value type.

    Defaults are validated too, and fields can be populated by name when an
    alias is declared.

    Example:
        >>> class Ping(SessionBaseModel):
        ...     method: str
        >>>
        >>> Ping(method="ping", extra=1)
        Traceback (most recent call last):
        ...
        pydantic_core._pydantic_core.ValidationError: ...
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        validate_default=True,
    )
