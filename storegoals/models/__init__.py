from .goal import Goal, GoalType
from .sale import Sale

__all__ = [
    "Goal",
    "GoalType",
    "Sale",
]
