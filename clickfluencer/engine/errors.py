"""Exception types for faults that are not ordinary rejected actions."""

from __future__ import annotations


class ClickfluencerError(Exception):
    """Base class for all clickfluencer faults."""


class UnknownIdError(ClickfluencerError, KeyError):
    """A trusted caller referenced an id missing from a roster or data table."""

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(f"Unknown {kind} id: {item_id!r}")
        self.kind = kind
        self.item_id = item_id

    def __str__(self) -> str:
        return str(self.args[0])


class MigrationError(ClickfluencerError):
    """A save document cannot be brought to the current schema."""


class SaveFormatError(ClickfluencerError):
    """A save document is structurally invalid after migration."""


class StorageError(ClickfluencerError):
    """The byte store failed to read, write or delete."""


class ReentrantMutationError(ClickfluencerError):
    """A state mutation was attempted while another one was being published."""
