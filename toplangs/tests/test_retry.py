"""
toplangs/tests/test_retry.py — Tests for exponential backoff on the GitHub fetch.

Tests verify:
- Transport fails twice then succeeds → data returned, delays 0.5s + 1s.
- Transport fails on all 4 attempts → UpstreamError wrapping the last failure.
- Non-transport errors propagate immediately, without sleeping.
"""

import pytest

from toplangs.config import TopLangsConfig
from toplangs.errors import MissingCredentialError, TransportError, UpstreamError
from toplangs.ingestion.retry import retry_with_backoff
from toplangs.metrics.languages import fetch_top_languages


class FlakyOperation:
    """Fails with TransportError ``failures`` times, then returns ``value``."""

    def __init__(self, failures, value="ok"):
        self.failures = failures
        self.value = value
        self.attempts = 0

    def __call__(self):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise TransportError(f"boom #{self.attempts}")
        return self.value


def test_success_on_first_attempt_never_sleeps(recorded_sleep):
    op = FlakyOperation(failures=0)
    assert retry_with_backoff(op, sleep=recorded_sleep) == "ok"
    assert op.attempts == 1
    assert recorded_sleep.delays == []


def test_two_failures_then_success(recorded_sleep):
    op = FlakyOperation(failures=2)
    assert retry_with_backoff(op, sleep=recorded_sleep) == "ok"
    assert op.attempts == 3
    assert recorded_sleep.delays == [0.5, 1.0]
    assert sum(recorded_sleep.delays) == pytest.approx(1.5)


def test_exhausted_retries_raise_upstream_error(recorded_sleep):
    op = FlakyOperation(failures=10)
    with pytest.raises(UpstreamError) as info:
        retry_with_backoff(op, sleep=recorded_sleep)

    assert op.attempts == 4
    assert recorded_sleep.delays == [0.5, 1.0, 2.0]
    assert isinstance(info.value.cause, TransportError)
    assert "boom #4" in str(info.value.cause)
    assert info.value.__cause__ is info.value.cause


def test_custom_budget(recorded_sleep):
    op = FlakyOperation(failures=10)
    with pytest.raises(UpstreamError):
        retry_with_backoff(op, retries=1, initial_delay=2, sleep=recorded_sleep)
    assert op.attempts == 2
    assert recorded_sleep.delays == [2]


def test_non_transport_errors_are_not_retried(recorded_sleep):
    def operation():
        raise MissingCredentialError()

    with pytest.raises(MissingCredentialError):
        retry_with_backoff(operation, sleep=recorded_sleep)
    assert recorded_sleep.delays == []


def test_fetch_top_languages_recovers_from_transport_failures(
    fake_client, repo_nodes, recorded_sleep
):
    client = fake_client(TransportError("reset"), TransportError("reset"), repo_nodes)
    table = fetch_top_languages("octocat", token="t", client=client, sleep=recorded_sleep)

    assert len(client.calls) == 3
    assert recorded_sleep.delays == [0.5, 1.0]
    assert "Python" in table


def test_fetch_top_languages_uses_config_retry_budget(fake_client, recorded_sleep):
    config = TopLangsConfig(fetch_retries=0)
    client = fake_client(TransportError("reset"))
    with pytest.raises(UpstreamError):
        fetch_top_languages("octocat", token="t", client=client, config=config,
                            sleep=recorded_sleep)
    assert len(client.calls) == 1
    assert recorded_sleep.delays == []
