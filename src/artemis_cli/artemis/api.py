"""
Artemis REST API wrapper functions.

High-level operations on top of an authenticated ArtemisSession. Every
response is turned into models by the parser module.
"""

import time
from typing import Callable

from ..config.models import PollSettings
from ..errors import NotFoundError, ResultsPendingError
from ..utils.logging import get_logger
from . import parser
from .models import Course, ExerciseDetails, Feedback, Result
from .session import ArtemisSession

logger = get_logger(__name__)


class ArtemisAPI:
    """
    Artemis API client for students.

    Usage:
        api = ArtemisAPI(session)
        for course in api.get_courses():
            print(course.title)
    """

    COURSES_PATH = "/api/courses/for-dashboard"
    EXERCISE_DETAILS_PATH = "/api/exercises/{task_id}/details"
    PARTICIPATIONS_PATH = "/api/exercises/{task_id}/participations"
    BUILD_LOGS_PATH = "/api/repository/{participation_id}/buildlogs"
    RESULT_DETAILS_PATH = "/api/participations/{participation_id}/results/{result_id}/details"

    def __init__(
        self,
        session: ArtemisSession,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the API client.

        Args:
            session: Authenticated session
            sleep: Function used to wait between result polls
        """
        self.session = session
        self._sleep = sleep

    # -------------------------------------------------------------------------
    # Courses
    # -------------------------------------------------------------------------

    def get_courses(self) -> list[Course]:
        """Get all courses the user is enrolled in, with their exercises."""
        logger.debug("Fetching courses...")
        payload = self.session.request_json("GET", self.COURSES_PATH)
        return parser.parse_courses(payload)

    def get_course(self, course_id: int) -> Course:
        """
        Get a single course from the dashboard.

        Raises:
            NotFoundError: If the user is not enrolled in such a course
        """
        for course in self.get_courses():
            if course.id == course_id:
                return course
        raise NotFoundError(
            self.session.url(self.COURSES_PATH),
            None,
            f"No course with id {course_id}, see 'artemis-cli list-courses'",
        )

    # -------------------------------------------------------------------------
    # Exercises
    # -------------------------------------------------------------------------

    def get_exercise_details(self, task_id: int) -> ExerciseDetails:
        """Get the user's participation and results for an exercise."""
        logger.debug(f"Fetching details of exercise {task_id}")
        payload = self.session.request_json(
            "GET", self.EXERCISE_DETAILS_PATH.format(task_id=task_id)
        )
        return parser.parse_exercise_details(payload)

    def start_exercise(self, task_id: int) -> str:
        """
        Start an exercise by creating a participation.

        Args:
            task_id: The exercise ID

        Returns:
            SSH URI of the newly created student repository
        """
        logger.info(f"Starting exercise {task_id}")
        payload = self.session.request_json(
            "POST", self.PARTICIPATIONS_PATH.format(task_id=task_id)
        )
        repo_uri = parser.parse_participation_repo_uri(payload)
        logger.debug(f"Repository of exercise {task_id}: {repo_uri}")
        return repo_uri

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def get_feedback(self, participation_id: int, result: Result) -> Feedback:
        """
        Get the details of a result.

        Build logs are fetched for failed builds, test results otherwise.
        """
        if result.build_failed:
            logger.info(f"Build of result {result.id} failed, fetching build logs")
            payload = self.session.request_json(
                "GET",
                self.BUILD_LOGS_PATH.format(participation_id=participation_id),
                params={"resultId": result.id},
            )
            return Feedback(result=result, build_logs=parser.parse_build_logs(payload))

        payload = self.session.request_json(
            "GET",
            self.RESULT_DETAILS_PATH.format(
                participation_id=participation_id, result_id=result.id
            ),
        )
        return Feedback(result=result, tests=parser.parse_test_results(payload))

    def get_latest_feedback(self, task_id: int) -> Feedback:
        """
        Get the feedback of the most recent result of an exercise.

        Raises:
            ResultsPendingError: If there are no results yet
        """
        details = self.get_exercise_details(task_id)
        latest = details.latest_result
        if latest is None:
            raise ResultsPendingError(
                f"There are no results available for task {task_id} yet"
            )
        return self.get_feedback(details.participation_id, latest)

    def wait_for_new_result(
        self,
        task_id: int,
        previous_result_id: int | None,
        poll: PollSettings | None = None,
    ) -> Feedback:
        """
        Wait until the build pipeline reported a result for a new push.

        Polls the exercise details with growing delays until the latest
        result differs from ``previous_result_id``.

        Args:
            task_id: The exercise ID
            previous_result_id: ID of the latest result before the push
            poll: Delays and attempt limit

        Returns:
            Feedback for the new result

        Raises:
            ResultsPendingError: If no new result shows up in time
        """
        poll = poll or PollSettings()
        waited = 0.0
        for attempt, delay in enumerate(poll.delays(), start=1):
            logger.debug(f"Waiting {delay:.1f}s for results (attempt {attempt})")
            self._sleep(delay)
            waited += delay

            details = self.get_exercise_details(task_id)
            latest = details.latest_result
            if latest is not None and latest.id != previous_result_id:
                logger.info(f"Got result {latest.id} after {waited:.1f}s")
                return self.get_feedback(details.participation_id, latest)

        logger.warning(f"Timeout waiting for results of task {task_id}")
        raise ResultsPendingError(
            f"No new result for task {task_id} after {waited:.0f}s, "
            f"try 'artemis-cli fetch {task_id}' later"
        )
