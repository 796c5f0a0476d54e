import pytest

from trivia.tests.mocks.feed import InMemoryRoomEventFeed


@pytest.fixture
def feed():
    return InMemoryRoomEventFeed()
