import pytest
import uuid

from tracker.services import patterns as pattern_service


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def make_pattern(user_id):
    """Store a pattern whose steps use the given intervals, in order."""
    def _make(*intervals, name="pattern"):
        steps = [(i + 1, interval) for i, interval in enumerate(intervals)]
        return pattern_service.create_pattern(user_id, name, steps)
    return _make
