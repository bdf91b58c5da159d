"""Nox automation for risklab development tasks."""

from pathlib import Path

import nox

# Default sessions to run
nox.options.sessions = ["lint", "test"]


@nox.session(python=["3.11", "3.12", "3.13"])
def test(session: nox.Session) -> None:
    """Run the test suite with coverage."""
    session.install("-e", ".[test]")
    session.run(
        "pytest",
        "--cov=risklab",
        "--cov-report=term-missing",
        "--cov-fail-under=80",
        "-q",
        *session.posargs,
    )


@nox.session(python="3.11")
def lint(session: nox.Session) -> None:
    """Run linting with ruff and black."""
    session.install("ruff", "black")
    session.run("ruff", "check", ".")
    session.run("black", "--check", ".")


@nox.session(python="3.11")
def typecheck(session: nox.Session) -> None:
    """Run type checking with mypy."""
    session.install("mypy", "pandas-stubs", "types-PyYAML")
    session.install("-e", ".")
    session.run("mypy", "risklab")


@nox.session(python=False)
def smoke(session: nox.Session) -> None:
    """Run every CLI command once against the classroom preset."""
    preset = str(Path("presets") / "classroom.yaml")

    session.run("risklab", "scenario", "--scenario", "parabolic", "--format", "csv")
    for scenario in ["strong_trend", "choppy_rally", "parabolic", "reversal"]:
        session.run(
            "risklab", "stops", "--scenario", scenario, "--params", preset, "--no-emoji"
        )
    session.run("risklab", "sizing", "--params", preset, "--seed", "7", "--format", "json")
    session.run("risklab", "atr", "--preset", "Crypto (BTC)", "--no-emoji")

    session.log("Smoke test passed!")


@nox.session(python=False)
def clean(session: nox.Session) -> None:
    """Clean up generated files and caches."""
    import shutil

    paths_to_remove = [
        ".pytest_cache",
        ".mypy_cache",
        ".ruff_cache",
        ".coverage",
        "htmlcov",
        ".nox",
        "dist",
        "build",
        "*.egg-info",
    ]

    for pattern in paths_to_remove:
        for path in Path(".").glob(pattern):
            session.log(f"Removing {path}")
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()
