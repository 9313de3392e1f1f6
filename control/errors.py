class PickPlaceError(Exception):
    pass


class ConfigurationError(PickPlaceError):
    """Malformed pose, approach, posture or config file."""


class BackendUnavailableError(PickPlaceError):
    """Raised when the motion planning backend cannot be loaded."""
