from enum import Enum


class OverduePolicy(Enum):
    MARK_COMPLETED = "mark_completed"
    MARK_INCOMPLETE = "mark_incomplete"

    @classmethod
    def from_flag(cls, mark_overdue_as_completed: bool) -> "OverduePolicy":
        return cls.MARK_COMPLETED if mark_overdue_as_completed else cls.MARK_INCOMPLETE


class TargetWeight(str, Enum):
    HEAVY = "heavy"
    NORMAL = "normal"
    LIGHT = "light"
    UNSET = "unset"


class PatternTransition(Enum):
    NONE_TO_NONE = "none_to_none"
    NONE_TO_PATTERN = "none_to_pattern"
    PATTERN_TO_NONE = "pattern_to_none"
    SAME_PATTERN = "same_pattern"
    OTHER_PATTERN_SAME_LENGTH = "other_pattern_same_length"
    OTHER_PATTERN_OTHER_LENGTH = "other_pattern_other_length"


class StepComparison(Enum):
    SAME_STRUCTURE = "same_structure"
    INTERVALS_DIFFER = "intervals_differ"
    LENGTH_DIFFERS = "length_differs"


class Regeneration(Enum):
    NONE = "none"
    NEW_IDENTITIES = "new_identities"
    EXISTING_IDENTITIES = "existing_identities"


TARGET_WEIGHT_LABELS = {
    TargetWeight.HEAVY: "heavy",
    TargetWeight.NORMAL: "normal",
    TargetWeight.LIGHT: "light",
    TargetWeight.UNSET: "not set",
}
