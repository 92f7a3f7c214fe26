class ControlError(Exception):
    """Base exception for the local control channel."""


class RuntimeDirectoryError(ControlError):
    """Raised when the user runtime directory cannot be resolved."""


class AlreadyRunningError(ControlError):
    """Raised when a live instance already owns the control endpoint."""


class ListenerBindError(ControlError):
    """Raised when the control endpoint cannot be bound."""


class EndpointNotFoundError(ControlError):
    """Raised when no control endpoint exists for a client to connect to."""
