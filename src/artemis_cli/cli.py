"""Console script for artemis_cli."""

import textwrap
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import typer
from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.text import Text

from .artemis.models import Course, Feedback, Task
from .config.loader import ConfigLoader
from .credentials import create_credential_store
from .errors import ArtemisCLIError
from .main import CommandRunner
from .utils.logging import get_logger, setup_logging, verbosity_to_level

logger = get_logger(__name__)

app = typer.Typer(
    name="artemis-cli",
    help="A CLI tool for interacting with Artemis tasks.",
    no_args_is_help=True,
    # Local variables may contain the password
    pretty_exceptions_show_locals=False,
)
config_app = typer.Typer(
    help="Sets the global configuration for login data.",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

console = Console()
err_console = Console(stderr=True)

# Verbosity from which errors are re-raised with their traceback
TRACEBACK_VERBOSITY = 4

LOG_STYLES = {"ERROR": "red", "INFO": "bright_blue"}


@dataclass
class CliState:
    verbosity: int = 0
    config_path: Path | None = None


@contextmanager
def _runner(ctx: typer.Context) -> Iterator[CommandRunner]:
    """Create a runner for one command and report its errors."""
    state: CliState = ctx.obj or CliState()
    runner = None
    try:
        loader = ConfigLoader(state.config_path)
        runner = CommandRunner(loader.load(), create_credential_store(), loader)
        yield runner
    except ArtemisCLIError as e:
        logger.debug(f"Command failed: {e!r}")
        err_console.print(Text.assemble(("Error: ", "bold red"), str(e)))
        if state.verbosity >= TRACEBACK_VERBOSITY:
            raise
        raise typer.Exit(code=1)
    finally:
        if runner is not None:
            runner.close()


def _line(text: str, style: str = "") -> None:
    console.print(Text(text, style=style), soft_wrap=True)


def print_courses(courses: list[Course]) -> None:
    for course in courses:
        _line(f"{course.id:<5} {course.title}")


def print_tasks(tasks: list[Task]) -> None:
    for task in tasks:
        active = "active" if task.is_active else "not started"
        _line(f"{task.id:<5} {task.title:<40} {active:<15} {task.status:<15}")


def print_feedback(feedback: Feedback) -> None:
    """Show the build log of a failed build, or the test results."""
    if feedback.build_failed:
        _line("BUILD FAILURE:", "bold red")
        for statement in feedback.build_logs:
            _line(str(statement), LOG_STYLES.get(statement.level or "", ""))
        return

    for test in feedback.tests:
        if test.passed:
            _line(f"✓ {test.name}", "green")
        else:
            _line(f"✗ {test.name}", "red")
            if test.explanation:
                _line(textwrap.indent(test.explanation, "    "))

    summary = f"{feedback.passed_count}/{len(feedback.tests)} tests passed"
    if feedback.result.score is not None:
        summary += f", score {feedback.result.score:g}%"
    _line(summary, "bold")


@app.callback()
def main(
    ctx: typer.Context,
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        count=True,
        help="Verbosity of the output (use -v -vv -vvv to increase verbosity)",
    ),
    cfg: Optional[Path] = typer.Option(
        None,
        "--cfg",
        "-c",
        help="Path to the configuration file",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write log output to this file (level set by -v)",
    ),
):
    """A CLI tool for interacting with Artemis tasks."""
    load_dotenv(find_dotenv(usecwd=True))
    setup_logging(level=verbosity_to_level(verbosity), log_file=log_file)
    logger.debug("Setup logging...")
    ctx.obj = CliState(verbosity=verbosity, config_path=cfg)


@app.command()
def list_courses(ctx: typer.Context):
    """Lists all enrolled courses on Artemis."""
    with _runner(ctx) as runner:
        print_courses(runner.list_courses())


@app.command()
def list_tasks(
    ctx: typer.Context,
    courseid: int = typer.Argument(..., help="The id of the course as shown by list-courses"),
):
    """Lists all available tasks of a course."""
    with _runner(ctx) as runner:
        print_tasks(runner.list_tasks(courseid))


@app.command()
def start_task(
    ctx: typer.Context,
    taskid: int = typer.Argument(..., help="The id of the task as given by list-tasks"),
):
    """Starts an Artemis task and clones its repository."""
    with _runner(ctx) as runner:
        path = runner.start_task(taskid)
        _line(f"Cloned task {taskid} into {path}")


@app.command()
def submit(
    ctx: typer.Context,
    taskid: int = typer.Argument(..., help="The id of the task as given by list-tasks"),
    path: Optional[Path] = typer.Option(
        None,
        "--path",
        "-p",
        help="Working tree to submit (default: the directory start-task created)",
    ),
):
    """Creates a commit, pushes to the repo and shows the test results."""
    with _runner(ctx) as runner:
        print_feedback(runner.submit(taskid, path))


@app.command()
def fetch(
    ctx: typer.Context,
    taskid: int = typer.Argument(..., help="The id of the task as given by list-tasks"),
):
    """Fetches and prints the latest test results."""
    with _runner(ctx) as runner:
        print_feedback(runner.fetch(taskid))


@config_app.command()
def base_url(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Base URL of the Artemis server"),
):
    """Sets the Artemis server to talk to."""
    with _runner(ctx) as runner:
        runner.configure(base_url=url)


@config_app.command()
def username(ctx: typer.Context, name: str = typer.Argument(..., help="Artemis login name")):
    """Stores the Artemis username."""
    with _runner(ctx) as runner:
        runner.configure(username=name)


@config_app.command()
def password(
    ctx: typer.Context,
    secret: Optional[str] = typer.Argument(
        None, metavar="PASSWORD", help="Artemis password (prompted for if omitted)"
    ),
):
    """Stores the Artemis password."""
    if secret is None:
        secret = typer.prompt("Password", hide_input=True)
    with _runner(ctx) as runner:
        runner.configure(password=secret)


if __name__ == "__main__":
    app()
