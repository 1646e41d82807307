"""Exceptions raised by PyPrecipField."""


class ConfigurationError(ValueError):
    """Invalid point set, render configuration or gradient.

    Raised at the offending update; the previously committed state is kept.
    """


class InitializationError(RuntimeError):
    """A render backend could not be built (GL context, shader compile/link)."""


__all__ = ["ConfigurationError", "InitializationError"]
