from selenium.common.exceptions import NoSuchElementException


class AutoHealError(RuntimeError):
    """Base class for framework errors."""


class UnsupportedBrowserError(AutoHealError, ValueError):
    """Raised when a browser outside the supported matrix is requested."""


class HealingFailedError(NoSuchElementException):
    """Raised when an element is still missing after healing was attempted."""
