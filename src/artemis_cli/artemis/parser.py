"""
Conversion of Artemis JSON payloads into typed models.

All functions are pure: they take the decoded JSON tree and either return
models or raise ParseError naming the offending field.
"""

from datetime import datetime, timezone
from typing import Any

from ..errors import ParseError
from ..utils.logging import get_logger
from .models import PERFECT_SCORE, Course, ExerciseDetails, LogStatement, Result, Task, Test

logger = get_logger(__name__)

_MISSING = object()

_TYPE_NAMES = {
    dict: "object",
    list: "array",
    str: "string",
    bool: "boolean",
    int: "integer",
    float: "number",
}


def _join(path: str, key: str | int) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else key


def _check_type(value: Any, expected: type, path: str) -> Any:
    # bool is a subclass of int, never accept it as a number
    if expected in (int, float) and isinstance(value, bool):
        raise ParseError(f"expected {_TYPE_NAMES[expected]}, got boolean", path)
    if expected is float and isinstance(value, int):
        return float(value)
    if not isinstance(value, expected):
        raise ParseError(
            f"expected {_TYPE_NAMES[expected]}, got {type(value).__name__}", path
        )
    return value


def _object(data: Any, path: str) -> dict[str, Any]:
    return _check_type(data, dict, path)


def _array(data: Any, path: str) -> list[Any]:
    return _check_type(data, list, path)


def _field(data: dict[str, Any], key: str, expected: type, path: str) -> Any:
    """Get a required field of the given type."""
    field_path = _join(path, key)
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None:
        raise ParseError("missing field", field_path)
    return _check_type(value, expected, field_path)


def _optional_field(data: dict[str, Any], key: str, expected: type, path: str) -> Any:
    """Get an optional field; null is treated like a missing field."""
    value = data.get(key)
    if value is None:
        return None
    return _check_type(value, expected, _join(path, key))


def _timestamp(value: str, path: str) -> datetime:
    try:
        timestamp = datetime.fromisoformat(value)
    except ValueError as e:
        raise ParseError(f"invalid timestamp {value!r}", path) from e
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def parse_courses(payload: Any) -> list[Course]:
    """Parse the response of the dashboard course listing.

    Args:
        payload: Decoded JSON of ``/api/courses/for-dashboard``

    Returns:
        List of Course objects, in server order
    """
    data = _object(payload, "$")
    raw_courses = _field(data, "courses", list, "")
    courses = []
    for i, course_info in enumerate(raw_courses):
        path = _join("courses", i)
        course_info = _object(course_info, path)
        raw_course = _field(course_info, "course", dict, path)
        courses.append(parse_course(raw_course, _join(path, "course")))
    logger.debug(f"Parsed {len(courses)} courses")
    return courses


def parse_course(raw: Any, path: str = "course") -> Course:
    """Parse one course object including its exercises."""
    raw = _object(raw, path)
    course_id = _field(raw, "id", int, path)
    title = _field(raw, "title", str, path)
    description = _optional_field(raw, "description", str, path) or ""

    raw_tasks = _optional_field(raw, "exercises", list, path) or []
    logger.debug(f"Parsing {len(raw_tasks)} exercises of course {course_id}")
    tasks = [
        parse_task(raw_task, _join(_join(path, "exercises"), i))
        for i, raw_task in enumerate(raw_tasks)
    ]
    return Course(id=course_id, title=title, description=description, tasks=tasks)


def parse_task(raw: Any, path: str = "exercise") -> Task:
    """Parse one exercise of a course.

    A task without participation is inactive. A task is completed as soon as
    any of its results scored exactly 100 percent.
    """
    raw = _object(raw, path)
    task = Task(
        id=_field(raw, "id", int, path),
        title=_field(raw, "title", str, path),
    )

    participations_path = _join(path, "studentParticipations")
    participations = _optional_field(raw, "studentParticipations", list, path)
    if not participations:
        return task

    participation_path = _join(participations_path, 0)
    participation = _object(participations[0], participation_path)
    task.is_active = True
    task.repo_uri = _optional_field(participation, "repositoryUri", str, participation_path)

    results_path = _join(participation_path, "results")
    raw_results = _optional_field(participation, "results", list, participation_path) or []
    for i, raw_result in enumerate(raw_results):
        result_path = _join(results_path, i)
        raw_result = _object(raw_result, result_path)
        score = _optional_field(raw_result, "score", float, result_path)
        if score == PERFECT_SCORE:
            task.completed = True
    return task


def parse_result(raw: Any, path: str = "result") -> Result:
    """Parse a single result of a participation."""
    raw = _object(raw, path)
    submission_path = _join(path, "submission")
    submission = _field(raw, "submission", dict, path)
    return Result(
        id=_field(raw, "id", int, path),
        completion_date=_timestamp(
            _field(raw, "completionDate", str, path), _join(path, "completionDate")
        ),
        score=_optional_field(raw, "score", float, path),
        build_failed=_field(submission, "buildFailed", bool, submission_path),
    )


def parse_exercise_details(payload: Any) -> ExerciseDetails:
    """Parse the response of ``/api/exercises/{id}/details``.

    Raises:
        ParseError: If the user has no participation in the exercise or a
            field is missing or mistyped
    """
    data = _object(payload, "$")
    exercise = _field(data, "exercise", dict, "")
    participations = _optional_field(exercise, "studentParticipations", list, "exercise")
    if not participations:
        raise ParseError(
            "no participation found, start the task first",
            "exercise.studentParticipations",
        )

    path = "exercise.studentParticipations[0]"
    participation = _object(participations[0], path)
    raw_results = _optional_field(participation, "results", list, path) or []
    results = [
        parse_result(raw_result, _join(_join(path, "results"), i))
        for i, raw_result in enumerate(raw_results)
    ]
    details = ExerciseDetails(
        exercise_id=_field(exercise, "id", int, "exercise"),
        participation_id=_field(participation, "id", int, path),
        results=results,
    )
    latest = details.latest_result
    if latest is not None:
        logger.debug(
            f"Latest result {latest.id} from {latest.completion_date.isoformat()}, "
            f"build failed: {latest.build_failed}"
        )
    return details


def parse_test_results(payload: Any) -> list[Test]:
    """Parse the feedback list of a result into tests.

    The explanation is only kept for failed tests.
    """
    tests = []
    for i, raw in enumerate(_array(payload, "$")):
        path = _join("", i)
        raw = _object(raw, path)
        passed = _field(raw, "positive", bool, path)
        test_case = _field(raw, "testCase", dict, path)
        name = _field(test_case, "testName", str, _join(path, "testCase"))
        explanation = None
        if not passed:
            explanation = _optional_field(raw, "detailText", str, path)
        tests.append(Test(name=name, passed=passed, explanation=explanation))
    return tests


def parse_build_logs(payload: Any) -> list[LogStatement]:
    """Parse the build log lines of a failed build."""
    logs = []
    for i, raw in enumerate(_array(payload, "$")):
        path = _join("", i)
        raw = _object(raw, path)
        time = _timestamp(_field(raw, "time", str, path), _join(path, "time"))
        logs.append(LogStatement(time=time, log=_field(raw, "log", str, path)))
    return logs


def parse_participation_repo_uri(payload: Any) -> str:
    """Get the SSH clone URI from a freshly created participation.

    Artemis reports an HTTPS URI with the user name in it
    (``https://user@host/path``); cloning goes through SSH with the generic
    ``git`` user instead.
    """
    data = _object(payload, "$")
    repo_uri = _field(data, "repositoryUri", str, "")
    _, sep, location = repo_uri.partition("@")
    if not sep:
        raise ParseError(f"repository URI {repo_uri!r} contains no '@'", "repositoryUri")
    return f"ssh://git@{location}"
