"""ContextVar-based buffer configuration for dynstr.

Configuration is read by every DynamicString operation from the current
context, so tests and embedding applications can change it locally without
touching global state.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed.

Usage:
    from dynstr.config import BufferConfig, buffer_config_context

    with buffer_config_context(BufferConfig(encoding="latin-1")):
        s = DynamicString.dup("caf\\xe9")

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BufferConfig:
    """Immutable buffer configuration.

    Attributes:
        check_invariants: Verify the structural invariant before and after
            every public operation. Each check scans the content, so a loop
            of single-byte appends costs quadratic time while it is on.
            Defaults to ``__debug__``, so running under ``python -O`` turns
            it off
        encoding: Codec used when a ``str`` is passed where bytes are expected,
            and by DynamicString.decode()
        errors: Codec error handler paired with ``encoding``

    """

    check_invariants: bool = __debug__
    encoding: str = "utf-8"
    errors: str = "strict"

    @classmethod
    def from_dict(cls, config_dict: dict) -> "BufferConfig":
        """Create BufferConfig from dictionary.

        Only includes keys that are valid BufferConfig fields; unknown keys
        are silently ignored.

        Args:
            config_dict: Dictionary with config values.

        Returns:
            New BufferConfig instance with values from dict.

        Example:
            >>> config = BufferConfig.from_dict({"encoding": "ascii", "other": 1})
            >>> config.encoding
            'ascii'

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: BufferConfig = BufferConfig()

_buffer_config: ContextVar[BufferConfig] = ContextVar(
    "buffer_config",
    default=_DEFAULT_CONFIG,
)


def get_buffer_config() -> BufferConfig:
    """Get current buffer configuration (thread-local)."""
    return _buffer_config.get()


def set_buffer_config(config: BufferConfig) -> None:
    """Set buffer configuration for current context.

    Args:
        config: BufferConfig instance to use for this context.

    """
    _buffer_config.set(config)


def reset_buffer_config() -> None:
    """Reset to the default configuration."""
    _buffer_config.set(_DEFAULT_CONFIG)


@contextmanager
def buffer_config_context(config: BufferConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Args:
        config: BufferConfig to use within the context.

    Example:
        >>> with buffer_config_context(BufferConfig(check_invariants=False)):
        ...     s = DynamicString.dup(b"fast path")

    """
    previous = _buffer_config.get()
    _buffer_config.set(config)
    try:
        yield
    finally:
        _buffer_config.set(previous)


__all__ = [
    "BufferConfig",
    "buffer_config_context",
    "get_buffer_config",
    "reset_buffer_config",
    "set_buffer_config",
]
