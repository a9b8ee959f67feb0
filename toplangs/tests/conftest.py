"""
toplangs/tests/conftest.py — Shared pytest fixtures for the toplangs test suite.

Repository payloads are hand-built in the shape returned by
GitHubGraphQLClient.fetch_repository_languages(), so every unit test runs
fully offline.

Fixtures:
    repo_nodes      — Three repositories, four languages, one colourless.
    language_table  — Table computed from repo_nodes with default weights.
    fake_client     — FakeClient class (scripted responses/failures).
    repo_factory    — make_repo() helper.
    lang_factory    — make_lang() helper.
    recorded_sleep  — Sleep replacement that records requested delays.
    github_token    — GitHub PAT from PAT_1 / GITHUB_TOKEN (or None).
"""

import os

import pytest

from toplangs.metrics.languages import LanguageStat, compute_language_table


# ── Pytest configuration hooks ────────────────────────────────────────────────

def pytest_configure(config):
    """Register custom markers and add --run-integration CLI option support."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that call the real GitHub API (deselected by default, "
        "pass --run-integration or -m integration to enable)",
    )


def pytest_addoption(parser):
    """Add --run-integration CLI flag to enable integration tests."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests that call the real GitHub API.",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is passed or -m integration is used."""
    markexpr = config.getoption("-m", default="")
    if "integration" in markexpr:
        return

    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test -- pass --run-integration or -m integration to run"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# ── Helpers ───────────────────────────────────────────────────────────────────

def make_repo(name: str, *languages: tuple) -> dict:
    """
    Build one repository node.

    Args:
        name:      Repository name.
        languages: (language, size, color) tuples; color may be None.
    """
    return {
        "name": name,
        "languages": {
            "edges": [
                {"size": size, "node": {"name": lang, "color": color}}
                for lang, size, color in languages
            ]
        },
    }


def make_lang(name: str, percent: float, size: float = 0.0, color: str = "#123456",
              count: int = 1) -> LanguageStat:
    return LanguageStat(name=name, color=color, size=size, count=count, percent=percent)


class FakeClient:
    """
    Stand-in for GitHubGraphQLClient.

    Each call to fetch_repository_languages() consumes the next scripted
    outcome: an exception instance is raised, anything else is returned.
    The last outcome repeats once the script is exhausted.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def fetch_repository_languages(self, login):
        self.calls.append(login)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class RecordedSleep:
    """Callable that records every requested delay instead of sleeping."""

    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def repo_nodes() -> list[dict]:
    """
    Three repositories:

        alpha: Python 600, JavaScript 200
        beta:  Python 100, Shell 50 (no colour)
        gamma: Go 50
    """
    return [
        make_repo("alpha", ("Python", 600, "#3572A5"), ("JavaScript", 200, "#f1e05a")),
        make_repo("beta", ("Python", 100, "#3572A5"), ("Shell", 50, None)),
        make_repo("gamma", ("Go", 50, "#00ADD8")),
    ]


@pytest.fixture
def language_table(repo_nodes):
    return compute_language_table(repo_nodes)


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def recorded_sleep() -> RecordedSleep:
    return RecordedSleep()


@pytest.fixture(scope="session")
def github_token() -> str | None:
    """
    GitHub personal access token from PAT_1 or GITHUB_TOKEN.

    Returns None if neither is set. Tests that require GitHub API access
    should skip when this fixture returns None.
    """
    return os.environ.get("PAT_1") or os.environ.get("GITHUB_TOKEN")


@pytest.fixture
def repo_factory():
    return make_repo


@pytest.fixture
def lang_factory():
    return make_lang
