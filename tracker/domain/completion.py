from typing import Sequence

from .entities import ReviewDate
from .enums import OverduePolicy


def finished_after_generation(policy: OverduePolicy, item_finished: bool, is_finished: bool) -> bool:
    # Only the completed policy can finish an item; nothing here reopens one.
    if policy is OverduePolicy.MARK_COMPLETED and item_finished:
        return True
    return is_finished


def completes_item(review_dates: Sequence[ReviewDate], step_number: int) -> bool:
    """Completing the last step finishes the whole item."""
    if not review_dates:
        return False
    return step_number == max(rd.step_number for rd in review_dates)


def reopens_item(is_finished: bool) -> bool:
    # Any un-completed step means the item is no longer fully reviewed.
    return is_finished
