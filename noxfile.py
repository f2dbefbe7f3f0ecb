import os
from pathlib import Path
import nox

# Keep session virtualenvs between runs
nox.options.reuse_existing_virtualenvs = True
# Run by a bare "nox"
nox.options.sessions = ["lint", "unit", "integration"]

# Installs the project with its test extra
TEST_DEPS = [".[test]"]

# Passed through from the caller's environment
PASSED_ENV_VARS = [
    "DATABASE_URL",
    "SECRET_KEY",
    "TIMEZONE",
    "OPENAI_API_KEY",
]


def _set_env(session):
    """Copy PASSED_ENV_VARS into the session and put the repo root on PYTHONPATH."""
    session.env["PYTHONPATH"] = str(Path.cwd())
    for var in PASSED_ENV_VARS:
        if var in os.environ:
            session.env[var] = os.environ[var]


@nox.session(name="lint")
def lint(session):
    """Format with isort and black, then run flake8 and mypy."""
    _set_env(session)
    session.install("isort", "black", "flake8", "mypy")
    session.run("isort", "classvote/", "tests/")
    session.run("black", "classvote/", "tests/")
    session.run("flake8", "classvote/", "tests/")
    session.run("mypy", "classvote/")


@nox.session(name="unit")
def unit(session):
    """
    Run unit tests (in-memory SQLite, no network).
    Usage:
      nox -s unit
      nox -s unit -- tests/unit/test_services/test_results.py::TestCountResults
    """
    _set_env(session)
    session.install(*TEST_DEPS)
    tests = session.posargs or ["tests/unit"]
    session.run(
        "pytest",
        *tests,
        "-m", "unit",
        "-vv",
        "--tb=short",
        "--cov=classvote",
        "--cov-report=term-missing",
        "--cov-report=html:.nox/htmlcov",
        "--cov-fail-under=80",
    )


@nox.session(name="integration")
def integration(session):
    """
    Run API tests through FastAPI's TestClient.
    Usage:
      nox -s integration
      nox -s integration -- tests/integration/test_api/test_admin.py
    """
    _set_env(session)
    session.install(*TEST_DEPS)
    tests = session.posargs or ["tests/integration"]
    session.run(
        "pytest",
        *tests,
        "-m", "integration",
        "--maxfail=1",
        "-vv",
        "--tb=short",
    )
