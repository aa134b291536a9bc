"""
data_model/errors.py — exception taxonomy shared by every package.

StructuralError and ConfigurationError are fatal and never retried.
PublishError and EventNotConfirmedError are transient: they are raised
inside a RetryExecutor and demoted by the caller once retries run out.
"""

from __future__ import annotations


class StructuralError(ValueError):
    """Malformed document or invalid level/kind combination."""

    def __init__(self, message: str, line_no: int | None = None) -> None:
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)
        self.line_no = line_no


class ConfigurationError(ValueError):
    """Relay catalog, unit graph or event fields that make the run impossible."""


class CircularDependencyError(ConfigurationError):
    def __init__(self, d_tag: str) -> None:
        super().__init__(f"Circular dependency between units at '{d_tag}'")
        self.d_tag = d_tag


class NoReachableRelaysError(RuntimeError):
    """Neither the selected relays nor the default relay answered the probe."""


class PublishError(RuntimeError):
    """A send attempt was accepted by fewer relays than required."""


class EventNotConfirmedError(RuntimeError):
    """A published event could not be fetched back and confirmed."""
