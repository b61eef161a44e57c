"""Service-layer exceptions."""


class SaveLoadError(Exception):
    """Raised when a snapshot cannot be serialized or restored."""


class ShareDecodeError(SaveLoadError):
    """Raised when a share token is malformed."""


class PresetError(Exception):
    """Raised when a preset id is not defined."""
