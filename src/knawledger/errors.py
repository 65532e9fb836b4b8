"""Exceptions raised while indexing notes into the catalog."""

from __future__ import annotations


class KnawledgeError(Exception):
    """Base class for every error raised by knawledger."""

    prefix = "Error"

    def __str__(self) -> str:
        message = super().__str__()
        return f"{self.prefix}: {message}" if message else self.prefix


class FileReadError(KnawledgeError):
    """Enumerating, reading or canonicalising a path failed."""

    prefix = "IO"


class EncodingError(KnawledgeError):
    """File contents or a path segment is not valid UTF-8."""

    prefix = "UTF-8"


class FrontMatterError(KnawledgeError):
    """Front-matter could not be deserialised."""

    prefix = "YAML error"


class InvalidDirectoryError(KnawledgeError):
    prefix = "Invalid Directory"


class CatalogError(KnawledgeError):
    """The catalog store rejected an operation."""

    prefix = "SQL"


class NotFoundError(KnawledgeError):
    prefix = "Not found"


class DoesNotExistError(KnawledgeError):
    prefix = "Does not exist"
