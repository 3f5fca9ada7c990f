from __future__ import annotations


class ShellError(Exception):
    """Base shell error."""


class NotRunningError(ShellError):
    def __init__(self, message: str = "a shell is not running"):
        super().__init__(message)


class ConfigurationError(ShellError):
    """Command tree violates the branch/leaf invariant."""

    def __init__(self, path: str, message: str = "parent command cannot have arguments"):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class TerminalError(ShellError):
    """Terminal backend failure."""

    def __init__(self, error: BaseException | str):
        super().__init__(str(error))
        self.error = error


class MenuFileError(ShellError):
    def __init__(self, path: str, message: str, details: str | None = None):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message
        self.details = details
