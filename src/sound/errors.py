class SoundError(Exception):
    """Raised when a transition sound cannot be decoded or played."""
