"""Error taxonomy for the tracker core.

Out-of-range exercise/set addresses raise the built-in ``IndexError``.
"""


class FitcoreError(Exception):
    """Base class for tracker errors."""


class ValidationError(FitcoreError):
    """Malformed or missing input to a creation or mutation operation."""


class SessionStateError(FitcoreError):
    """Operation is not legal in the current workout session state."""


class ProductLookupError(FitcoreError, LookupError):
    """External food lookup failed or returned nothing usable."""


class DeviceSyncError(FitcoreError):
    """Device feed could not produce a health snapshot."""


class StorageError(FitcoreError):
    """A stored snapshot could not be decoded."""
