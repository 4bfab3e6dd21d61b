from .data.models import Item, Pattern, PatternStep, ReviewDate  # noqa: F401
