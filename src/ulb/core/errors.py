"""Error taxonomy shared by the CLI, config loader and supervisor."""


class UlbError(Exception):
    """Base class for all ulb errors."""


class ConfigurationError(UlbError):
    """Project config is missing, unparsable, or lacks a required field."""


class LaunchError(UlbError):
    """Backend executable could not be started."""


class StreamEndedError(UlbError):
    """The progress stream ended early (decode failure or read error).

    Not a real failure: the stream reader absorbs it and stops.
    """


class BackendExitError(UlbError):
    """Backend exited with a nonzero status."""

    def __init__(self, returncode: int, message: str = ""):
        self.returncode = returncode
        super().__init__(message or f"Backend exited with code {returncode}")


class UIRuntimeError(UlbError):
    """The progress UI loop crashed."""
