class TrackerError(Exception):
    """Base class for rejected tracker operations."""


class ValidationError(TrackerError):
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class HasCompletedReviewDate(TrackerError):
    def __init__(self, message="the item has completed review dates, so its schedule cannot change"):
        super().__init__(message)


class MismatchedIdsAndSteps(TrackerError):
    def __init__(self, id_count: int, step_count: int):
        super().__init__(
            f"got {id_count} review date ids for {step_count} pattern steps"
        )
        self.id_count = id_count
        self.step_count = step_count


class NewDateBeforeInitial(TrackerError):
    def __init__(self, message="the new review date cannot precede its initial scheduled date"):
        super().__init__(message)


class NoDiff(TrackerError):
    def __init__(self, message="the update contains no changes"):
        super().__init__(message)
