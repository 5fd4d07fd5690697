"""Exception types raised by the livepoll package."""


class LivePollError(Exception):
    """Base class for livepoll errors."""
    pass


class SynthesisError(LivePollError):
    """Raised when the synthesis collaborator cannot produce a result."""
    pass
