"""Artemis data models."""

from dataclasses import dataclass, field
from datetime import datetime

PERFECT_SCORE = 100.0


@dataclass
class Task:
    """An exercise as shown on the course dashboard."""

    id: int
    title: str
    is_active: bool = False
    completed: bool = False
    repo_uri: str | None = None

    @property
    def status(self) -> str:
        """Progress label used in task listings."""
        if self.completed:
            return "completed"
        if self.is_active:
            return "incomplete"
        return "not started"


@dataclass
class Course:
    """A course the user is enrolled in."""

    id: int
    title: str
    description: str = ""
    tasks: list[Task] = field(default_factory=list)


@dataclass
class Result:
    """Outcome of one automated grading run."""

    id: int
    completion_date: datetime
    score: float | None = None
    build_failed: bool = False

    @property
    def is_perfect(self) -> bool:
        return self.score == PERFECT_SCORE


@dataclass
class ExerciseDetails:
    """The user's participation in one exercise and its results."""

    exercise_id: int
    participation_id: int
    results: list[Result] = field(default_factory=list)

    @property
    def latest_result(self) -> Result | None:
        """The result with the most recent completion date, if any."""
        if not self.results:
            return None
        return max(self.results, key=lambda r: r.completion_date)


@dataclass
class Test:
    """A single test case of a result."""

    __test__ = False  # not a pytest test class

    name: str
    passed: bool
    explanation: str | None = None


@dataclass
class LogStatement:
    """One line of a build log."""

    time: datetime
    log: str

    @property
    def level(self) -> str | None:
        """Log level prefix such as ERROR or INFO, if the line has one."""
        if self.log.startswith("[ERROR]"):
            return "ERROR"
        if self.log.startswith("[INFO]"):
            return "INFO"
        return None

    def __str__(self) -> str:
        return f"{self.time.isoformat():<30} {self.log}"


@dataclass
class Feedback:
    """What the user gets to see for the latest result of an exercise."""

    result: Result
    tests: list[Test] = field(default_factory=list)
    build_logs: list[LogStatement] = field(default_factory=list)

    @property
    def build_failed(self) -> bool:
        return self.result.build_failed

    @property
    def passed_count(self) -> int:
        return sum(1 for t in self.tests if t.passed)
