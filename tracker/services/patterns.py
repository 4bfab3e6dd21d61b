import uuid

import structlog

from ..config import DEFAULT_TARGET_WEIGHT
from ..data import repos
from ..domain.entities import new_pattern, new_pattern_step

logger = structlog.get_logger()


def create_pattern(user_id, name, steps, target_weight=DEFAULT_TARGET_WEIGHT):
    """Validate and store a pattern.

    ``steps`` is a sequence of ``(step_number, interval_days)`` pairs in the
    order the user entered them; they must already be ascending.
    """
    pattern = new_pattern(
        uuid.uuid4(),
        user_id,
        name,
        target_weight,
        [new_pattern_step(step_number, interval_days) for step_number, interval_days in steps],
    )
    repos.create_pattern(pattern)

    logger.info("pattern_created",
        user_id=str(user_id),
        pattern_id=str(pattern.id),
        step_count=len(pattern.steps),
        target_weight=pattern.target_weight.value,
    )
    return pattern


def list_patterns(user_id):
    return repos.patterns_for_user(user_id)
