class SplitError(Exception):
    """
    Base class for every error raised while splitting images.
    """


class ValidationError(SplitError):
    """Malformed split request. Raised before any file is touched."""


class DecodeError(SplitError):
    """Source file is unreadable or not an image. The file is skipped."""


class DirectoryError(SplitError):
    """Output directory cannot be created. All tiles of the file are skipped."""


class CollisionError(SplitError):
    """An existing destination file cannot be removed. The tile is skipped."""


class EncodeError(SplitError):
    """A tile cannot be written. The tile is skipped."""
