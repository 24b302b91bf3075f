class HuffcompError(Exception):
    """Base class for failures reported to the user."""


class ArgumentError(HuffcompError):
    pass


class InputError(HuffcompError):
    pass


class FormatError(HuffcompError):
    """The container is truncated or corrupt."""


class InternalError(RuntimeError):
    """A tree invariant was violated. This is a bug, not bad input."""
