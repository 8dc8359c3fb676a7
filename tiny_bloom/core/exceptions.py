"""
Exceptions raised by TinyBloom.
"""


class InvalidConfigurationError(ValueError):
    """
    Raised when a filter or hash-function set is built with unusable parameters.

    Subclasses ValueError so callers validating input can keep catching the
    built-in type.
    """
