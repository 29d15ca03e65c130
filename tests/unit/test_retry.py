"""Backoff computation tests."""

from types import SimpleNamespace

import pytest

from sagaflow.utils.retry import compute_backoff, schedule_retry


def test_compute_backoff_growth():
    assert compute_backoff(1, delay_ms=100, multiplier=2) == 100
    assert compute_backoff(2, delay_ms=100, multiplier=2) == 200
    assert compute_backoff(3, delay_ms=100, multiplier=2) == 400


def test_compute_backoff_has_no_jitter():
    assert compute_backoff(2) == compute_backoff(2) == 2000


def test_compute_backoff_multiplier_one_is_constant():
    assert compute_backoff(5, delay_ms=250, multiplier=1) == 250


@pytest.mark.asyncio
async def test_schedule_retry_sleeps_milliseconds(monkeypatch):
    slept = []

    async def fake_sleep(seconds):
        slept.append(seconds)

    monkeypatch.setattr("sagaflow.utils.retry.asyncio", SimpleNamespace(sleep=fake_sleep))
    await schedule_retry(250)
    assert slept == [0.25]
