import os
from pathlib import Path
import nox

# Reuse existing virtualenvs for faster runs
nox.options.reuse_existing_virtualenvs = True
# Default sessions when running "nox"
nox.options.sessions = ["lint", "unit", "integration"]

# Environment variables to propagate
PASSED_ENV_VARS = [
    "DATABASE_URL",
    "SECRET_KEY",
    "LOG_LEVEL",
]


def _set_env(session):
    """
    Propagate configuration into the session and keep tests on SQLite
    unless a database URL is given explicitly.
    """
    session.env["PYTHONPATH"] = str(Path.cwd())
    for var in PASSED_ENV_VARS:
        if var in os.environ:
            session.env[var] = os.environ[var]


def _install(session):
    session.install("-e", ".[test]")


@nox.session(name="lint")
def lint(session):
    """
    Code formatting, linting, and type-checks:
      - isort
      - black
      - flake8
      - mypy
    """
    _set_env(session)
    session.install("isort", "black", "flake8", "mypy")
    session.run("isort", "--check", "attendance/", "tests/")
    session.run("black", "--check", "attendance/", "tests/")
    session.run("flake8", "attendance/", "tests/")
    session.run("mypy", "attendance/")


@nox.session(name="unit")
def unit(session):
    """
    Run unit tests against an in-memory SQLite database.
    Usage:
      nox -s unit
      nox -s unit -- tests/unit/test_services/test_codes.py
    """
    _set_env(session)
    _install(session)
    tests = session.posargs or ["tests/unit"]
    session.run(
        "pytest",
        *tests,
        "-m", "unit",
        "-vv",
        "--tb=short",
        "--cov=attendance",
        "--cov-report=term-missing",
        "--cov-report=html:.nox/htmlcov",
    )


@nox.session(name="integration")
def integration(session):
    """
    Run the HTTP tests through the FastAPI application.
    Usage:
      nox -s integration
      nox -s integration -- tests/integration/test_api/test_meetings.py
    """
    _set_env(session)
    _install(session)
    tests = session.posargs or ["tests/integration"]
    session.run(
        "pytest",
        *tests,
        "-m", "integration",
        "-vv",
        "--tb=short",
    )
