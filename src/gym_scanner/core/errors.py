"""Exception types shared across gym-scanner."""


class GymScannerError(Exception):
    """Base class for all gym-scanner errors."""


class ValidationFailure(GymScannerError):
    """An uploaded document was rejected before reaching the AI service."""


class ExtractionFailure(GymScannerError):
    """The AI service failed or returned something that is not a workout sheet."""


class IndexOutOfRange(GymScannerError, IndexError):
    """An exercise index does not exist in the plan."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Exercise index {index} out of range (plan has {size} exercises)")
        self.index = index
        self.size = size


class NoHistory(GymScannerError):
    """Undo was requested for an exercise that has no saved versions."""


class CorruptStoreError(GymScannerError):
    """Stored plan data exists but could not be read."""
