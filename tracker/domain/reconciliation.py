"""Decide what an item update does to its review dates.

``classify`` reduces the current and requested (pattern, learned date) pair
to a ``Reconciliation``: one ``PatternTransition`` variant, a
``StepComparison`` when a pattern is replaced by another, and whether the
learned date moved. Everything the orchestrator needs (the completed-progress
check, which generator to run, which writes follow) is derived from it.
"""
from collections import namedtuple
from dataclasses import dataclass
from typing import Optional, Sequence

from .entities import PatternStep
from .enums import PatternTransition, Regeneration, StepComparison

PatternState = namedtuple("PatternState", ["pattern_id", "learned_date"])


def compare_steps(current: Sequence[PatternStep], requested: Sequence[PatternStep]) -> StepComparison:
    if len(current) != len(requested):
        return StepComparison.LENGTH_DIFFERS
    # Mismatched numbering means the rows cannot be matched up, so treat
    # it like a length change and replace them.
    if any(c.step_number != r.step_number for c, r in zip(current, requested)):
        return StepComparison.LENGTH_DIFFERS
    if any(c.interval_days != r.interval_days for c, r in zip(current, requested)):
        return StepComparison.INTERVALS_DIFFER
    return StepComparison.SAME_STRUCTURE


@dataclass(frozen=True)
class Reconciliation:
    transition: PatternTransition
    learned_date_changed: bool
    step_comparison: Optional[StepComparison] = None

    @property
    def pattern_null_to_set(self):
        return self.transition is PatternTransition.NONE_TO_PATTERN

    @property
    def pattern_set_to_null(self):
        return self.transition is PatternTransition.PATTERN_TO_NONE

    @property
    def pattern_set_to_set(self):
        return self.transition in (
            PatternTransition.SAME_PATTERN,
            PatternTransition.OTHER_PATTERN_SAME_LENGTH,
            PatternTransition.OTHER_PATTERN_OTHER_LENGTH,
        )

    @property
    def same_pattern_id(self):
        return self.transition in (PatternTransition.NONE_TO_NONE, PatternTransition.SAME_PATTERN)

    @property
    def steps_length_differs(self):
        return self.step_comparison is StepComparison.LENGTH_DIFFERS

    @property
    def only_intervals_differ(self):
        return self.step_comparison is StepComparison.INTERVALS_DIFFER

    @property
    def same_step_structure(self):
        return self.step_comparison is StepComparison.SAME_STRUCTURE

    @property
    def requires_completed_check(self):
        """True when the update would discard the meaning of completed reviews."""
        changed = self.learned_date_changed
        return (
            self.pattern_set_to_null
            or (self.pattern_set_to_set and changed)
            or (self.pattern_set_to_set and not changed and not self.same_pattern_id)
            or (not changed and self.steps_length_differs)
            or (not changed and self.only_intervals_differ)
        )

    @property
    def regeneration(self):
        if self.pattern_null_to_set or self.steps_length_differs:
            return Regeneration.NEW_IDENTITIES
        if (
            self.only_intervals_differ
            or (self.same_step_structure and self.learned_date_changed)
            or (self.pattern_set_to_set and self.same_pattern_id and self.learned_date_changed)
        ):
            return Regeneration.EXISTING_IDENTITIES
        return Regeneration.NONE

    @property
    def deletes_existing(self):
        return self.pattern_set_to_null or self.steps_length_differs

    @property
    def inserts_generated(self):
        return self.regeneration is Regeneration.NEW_IDENTITIES

    @property
    def updates_in_place(self):
        return self.regeneration is Regeneration.EXISTING_IDENTITIES


def classify(
    current: PatternState,
    requested: PatternState,
    current_steps: Optional[Sequence[PatternStep]] = None,
    requested_steps: Optional[Sequence[PatternStep]] = None,
) -> Reconciliation:
    """Classify a pattern / learned-date change.

    The step lists are only read when both states carry a pattern and the
    ids differ; for the same pattern id the steps are identical by definition.
    """
    changed = current.learned_date != requested.learned_date

    if current.pattern_id is None and requested.pattern_id is None:
        return Reconciliation(PatternTransition.NONE_TO_NONE, changed)
    if current.pattern_id is None:
        return Reconciliation(PatternTransition.NONE_TO_PATTERN, changed)
    if requested.pattern_id is None:
        return Reconciliation(PatternTransition.PATTERN_TO_NONE, changed)
    if current.pattern_id == requested.pattern_id:
        return Reconciliation(PatternTransition.SAME_PATTERN, changed, StepComparison.SAME_STRUCTURE)

    if current_steps is None or requested_steps is None:
        raise ValueError("both step lists are needed to compare two different patterns")

    comparison = compare_steps(current_steps, requested_steps)
    if len(current_steps) == len(requested_steps):
        transition = PatternTransition.OTHER_PATTERN_SAME_LENGTH
    else:
        transition = PatternTransition.OTHER_PATTERN_OTHER_LENGTH
    return Reconciliation(transition, changed, comparison)
