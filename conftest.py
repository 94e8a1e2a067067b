import pytest

from infrastructure.container import container


@pytest.fixture(autouse=True)
def test_container():
    """Fresh in-memory storage and mock notifications for every test."""
    container.configure_for_testing()
    yield container
    container.reset()


@pytest.fixture
def publisher(test_container):
    return test_container.notifications()


@pytest.fixture
def storage(test_container):
    return test_container.storage()
