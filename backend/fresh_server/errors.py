"""Error taxonomy shared by the codec, the stores and the HTTP layer."""

from __future__ import annotations


class FreshServerError(Exception):
    """Base class for every error raised by fresh-server."""


class CodecError(FreshServerError):
    """Metadata could not be converted to or from its stored text form."""


class DecodeError(CodecError):
    """Stored metadata text is empty, malformed or of an unexpected type."""


class EncodeError(CodecError):
    """A metadata document holds a value that has no JSON representation."""


class NotFoundError(FreshServerError):
    """No configuration entry matched the lookup."""


class StorageError(FreshServerError):
    """Any other persistence failure (I/O, constraint, connection)."""


class ValidationError(FreshServerError):
    """A required request parameter is missing."""


class ConfigError(FreshServerError):
    """A required startup setting is missing or invalid."""
