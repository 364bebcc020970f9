"""
Artemis integration module.

Handles communication with the Artemis REST API: the authenticated session,
the endpoint wrappers and the conversion of responses into models.
"""

from .api import ArtemisAPI
from .models import Course, ExerciseDetails, Feedback, LogStatement, Result, Task, Test
from .session import ArtemisSession, SessionState, SessionStateKind

__all__ = [
    # API client
    "ArtemisAPI",
    "ArtemisSession",
    "SessionState",
    "SessionStateKind",
    # Models
    "Course",
    "ExerciseDetails",
    "Feedback",
    "LogStatement",
    "Result",
    "Task",
    "Test",
]
