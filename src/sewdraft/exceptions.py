"""Exception hierarchy for sewdraft."""


class SewdraftError(Exception):
    """Base exception for all sewdraft errors.

    The draft orchestrator attaches the name of the part that was executing
    when the error was raised, so messages read ``[part back] ...``.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        self.part: str | None = None
        super().__init__(message)

    def with_part(self, part: str) -> "SewdraftError":
        """Attach part context unless an inner handler already did."""
        if self.part is None:
            self.part = part
        return self

    def __str__(self) -> str:
        if self.part:
            return f"[part {self.part}] {self.message}"
        return self.message


class ConfigurationError(SewdraftError):
    """A measurement, option or design name is missing or invalid."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration '{key}': {reason}")


class GeometryError(SewdraftError):
    """A path or point operation was asked to do something structurally invalid."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Geometry error in {operation}: {reason}")


class MacroError(SewdraftError):
    """A macro is unknown, badly registered or called with invalid parameters."""

    def __init__(self, macro: str, reason: str) -> None:
        self.macro = macro
        self.reason = reason
        super().__init__(f"Macro '{macro}' failed: {reason}")


class DependencyOrderError(SewdraftError):
    """A part read a store key that no earlier part wrote."""

    def __init__(self, key: str, part: str | None, reason: str | None = None) -> None:
        self.key = key
        self.reader = part
        detail = reason or "key was never written by an earlier part"
        reader = f" by part '{part}'" if part else ""
        super().__init__(f"Store key '{key}' read{reader}: {detail}")


class StoreError(SewdraftError):
    """A store operation does not fit the value already held at a key."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Store key '{key}': {reason}")


class DraftIOError(SewdraftError):
    """Errors related to reading inputs or writing pattern documents."""

    pass


class InputLoadError(DraftIOError):
    """Error loading a measurements/options input file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load input '{path}': {reason}")


class OutputSaveError(DraftIOError):
    """Error saving a pattern document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save pattern '{path}': {reason}")
