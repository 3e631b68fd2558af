class ImprevError(Exception):
    """Base class for errors that end a render."""


class DecodeError(ImprevError):
    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not decode image {path}: {reason}")


class InvalidDimensions(ImprevError, ValueError):
    """A width, height, column or row count was zero after fallbacks were applied."""


class OutputError(ImprevError, OSError):
    """Writing the rendered frame to the output stream failed."""
