"""
Exception hierarchy for the landing package.
"""


class LandingError(Exception):
    """Base class for all landing errors"""


class SurfaceUnavailableError(LandingError, RuntimeError):
    """No rendering surface could be acquired; the renderer did not mount"""


class ConfigError(LandingError, ValueError):
    """Invalid configuration file or value"""


class WaitlistStoreError(LandingError):
    """The waitlist table could not be read or written"""


class WaitlistConflictError(WaitlistStoreError):
    """The email is already on the waitlist"""

    def __init__(self, email: str, message: str = "This email is already registered!"):
        super().__init__(message)
        self.email = email


class WaitlistConfigurationError(WaitlistStoreError):
    """The remote store has no usable URL or key"""
