class StageTransitionError(Exception):
    """Raised when a stage update violates the tracker's transition contract."""
