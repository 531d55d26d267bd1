"""
Elowen Core - Data model, profile store and error taxonomy.
"""

from elowen.core.errors import (
    CollaboratorFailure,
    ElowenError,
    InvariantViolation,
    NotFoundWarning,
)
from elowen.core.models import (
    Assessment,
    CarePlan,
    DailyRoutine,
    NotStarted,
    Period,
    Ready,
    RoutineStep,
    SkinAnalysis,
    SkinMetrics,
    SkinType,
    UserProfile,
)
from elowen.core.store import ProfileStore

__all__ = [
    "Assessment",
    "CarePlan",
    "CollaboratorFailure",
    "DailyRoutine",
    "ElowenError",
    "InvariantViolation",
    "NotFoundWarning",
    "NotStarted",
    "Period",
    "ProfileStore",
    "Ready",
    "RoutineStep",
    "SkinAnalysis",
    "SkinMetrics",
    "SkinType",
    "UserProfile",
]
