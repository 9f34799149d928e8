"""
ChromaLab Color Engine Errors

Typed failures raised by the color engine. Numeric input is clamped rather
than rejected, so only structurally invalid input surfaces one of these.
"""


class ColorEngineError(Exception):
    """Base class for all color engine failures."""


class ParseError(ColorEngineError, ValueError):
    """Raised when a color string cannot be parsed."""

    def __init__(self, text: str, reason: str = "unrecognized color format"):
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot parse color {text!r}: {reason}")


class RangeError(ColorEngineError, ValueError):
    """Raised for parameters that have no meaningful clamped value (e.g. grid size 0)."""


class ClusteringError(ColorEngineError, RuntimeError):
    """Raised when a buffer cannot be clustered into the requested k colors."""


class ExtractionCancelled(ClusteringError):
    """Raised when a cooperative cancellation check stops a k-means run."""


class ConvergenceWarning(UserWarning):
    """Emitted when k-means stops at its iteration cap without converging."""
