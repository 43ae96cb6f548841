"""Exceptions raised by the publication sync tools."""


class PublicationSyncError(Exception):
    """Base class for all pubsync errors."""


class SourceUnavailableError(PublicationSyncError):
    """A source adapter could not reach its provider or got a non-success status."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class ConfigCorruptError(PublicationSyncError):
    """An override or site configuration file is unreadable or unparseable."""


class OperatorInputError(PublicationSyncError):
    """An operator supplied a malformed title or year."""
