"""Shared pytest configuration for the DazzleUtils test suite."""

import pytest

from dazzleutils.aio import TaskQueue


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: timing based tests that sleep for real (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def reset_task_tags():
    """Restart default task tag numbering at task-0."""
    TaskQueue.tag_counter.reset()
    yield TaskQueue.tag_counter
    TaskQueue.tag_counter.reset()
