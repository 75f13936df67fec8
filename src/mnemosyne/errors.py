"""Exceptions raised by mnemosyne."""


class MnemosyneError(Exception):
    """Base class for mnemosyne errors."""


class DispatchError(MnemosyneError, TypeError):
    """A cached operation could not be dispatched to its computation."""


class SerializationError(MnemosyneError):
    """A cached value could not be encoded or decoded."""
