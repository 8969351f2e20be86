"""
Exceptions raised by the bilingual subtitle pipeline.
"""


class BilingualSrtError(RuntimeError):
    """Base class for pipeline errors."""


class ConfigurationError(BilingualSrtError):
    """Fatal setup problem, e.g. a missing API key. Never retried."""


class ResponseParseError(BilingualSrtError):
    """The remote response did not contain any text we know how to read."""
