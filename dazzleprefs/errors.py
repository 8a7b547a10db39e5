"""Exception taxonomy for DazzlePrefs.

Every error raised by the library derives from PreferencesError. Each
class also derives from the closest builtin exception so callers can
catch `ValueError` or `OSError` the way they would anywhere else.
"""


class PreferencesError(Exception):
    """Base class for all preference store errors."""
    pass


class NullInputError(PreferencesError, TypeError):
    """Raised when a required argument (key, value, path, stream) is None."""
    pass


class InvalidArgumentError(PreferencesError, ValueError):
    """Raised when a key, value, name or path violates length or syntax rules."""
    pass


class InvalidStateError(PreferencesError, RuntimeError):
    """Raised when an operation is invoked on a node that has been removed."""
    pass


class UnsupportedOperationError(PreferencesError, NotImplementedError):
    """Raised when attempting to remove a root node."""
    pass


class InvalidFormatError(PreferencesError, ValueError):
    """Raised when an import document is malformed, truncated or unrecognized."""
    pass


class BackingStoreError(PreferencesError, OSError):
    """Raised when the backing store fails during flush or sync.

    The underlying exception is always chained as __cause__.
    """
    pass
