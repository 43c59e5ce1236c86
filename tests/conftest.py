"""Pytest configuration and fixtures for the test suite."""

import pytest

from app.modules.cards.models.cards import AgeGroup, CourseLength, GenerationRequest
from tests.fixtures import SleepRecorder


@pytest.fixture
def sleeps():
    """Provide a recorder used in place of asyncio.sleep."""
    return SleepRecorder()


@pytest.fixture
def quick_request():
    return GenerationRequest(
        topic="Dinosaurs", age_group=AgeGroup.YOUNG, course_length=CourseLength.QUICK
    )
