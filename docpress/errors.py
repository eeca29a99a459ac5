"""
Exceptions and cancellation support for the rendering engine.

License: MIT
"""


class DocpressError(Exception):
    """Base class for engine errors."""


class ThemeError(DocpressError, ValueError):
    """Raised when a theme reference cannot be resolved."""


class RenderCancelled(DocpressError):
    """Raised when the caller cancels a render between two pages."""


class CancellationToken:
    """
    Cooperative cancellation flag shared between the caller and the engine.

    The engine only looks at it when it is about to open a new page, so a
    cancelled render never leaves a half-drawn page behind.
    """

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RenderCancelled("Render cancelled by caller")
