"""
Shared pytest fixtures for the Task API test suite.

This module contains fixtures that are shared across all test modules.
Fixtures follow the Arrange-Act-Assert (AAA) pattern and ensure
test isolation by providing fresh data for each test.

The application is built once per session with a task store injected
over an in-process mongomock collection, so no MongoDB server is needed.
The collection is emptied before and after every test.
"""

import os
import pytest
from typing import Any
from faker import Faker
import mongomock

# Set testing environment before importing app
os.environ["FLASK_ENV"] = "testing"

from app import create_app
from app.models import Task, TaskStatus
from app.store import MongoTaskStore, create_mongo_store


# Initialize Faker for generating test data
fake = Faker()

# Nothing listens on port 1, so every operation fails fast
UNREACHABLE_MONGO_URI = "mongodb://127.0.0.1:1/?directConnection=true"


# -----------------------------------------------------------------------------
# Store Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def mongo_collection():
    """
    Provide an in-process MongoDB collection for the test session.

    Yields:
        mongomock collection implementing the pymongo Collection API.
    """
    client = mongomock.MongoClient()
    yield client["tasks_test"]["tasks"]
    client.close()


@pytest.fixture(scope="session")
def store(mongo_collection) -> MongoTaskStore:
    """Task store shared by the session-scoped application."""
    return MongoTaskStore(mongo_collection)


@pytest.fixture(scope="session")
def unreachable_store() -> MongoTaskStore:
    """
    Task store pointing at a MongoDB server that does not exist.

    A short timeout keeps the resilience tests fast.
    """
    return create_mongo_store(UNREACHABLE_MONGO_URI, "tasks_test", "tasks", timeout_ms=100)


@pytest.fixture(scope="function")
def clean_store(store, mongo_collection):
    """
    Provide an empty task store for each test.

    Clears the collection before the test runs and again afterwards so
    state never leaks between tests.

    Yields:
        The shared MongoTaskStore, empty.
    """
    mongo_collection.delete_many({})
    yield store
    mongo_collection.delete_many({})


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def app(store):
    """
    Create application instance for the test session.

    The 'session' scope means the same app instance is reused
    for all tests, improving performance.

    Yields:
        Flask application instance configured for testing.
    """
    application = create_app("testing", store=store)
    yield application


@pytest.fixture(scope="function")
def client(app, clean_store):
    """
    Create a test client for making HTTP requests against an empty store.

    Yields:
        Flask test client for making HTTP requests.
    """
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture(scope="function")
def unavailable_client(unreachable_store):
    """
    Create a test client whose task store cannot reach its server.

    Yields:
        Flask test client for an app backed by an unreachable store.
    """
    application = create_app("testing", store=unreachable_store)
    with application.test_client() as test_client:
        yield test_client


# -----------------------------------------------------------------------------
# Test Data Factory Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def task_factory(clean_store):
    """
    Factory fixture for creating Task records through the store.

    Example:
        def test_something(task_factory):
            task = task_factory(title="My Task")
            assert task.id is not None
    """

    def _create_task(
        title: str | None = None,
        description: str | None = None,
        status: str | None = None,
    ) -> Task:
        return clean_store.create({
            "title": title or fake.sentence(nb_words=4),
            "description": description or fake.paragraph(),
            "status": status,
        })

    return _create_task


@pytest.fixture
def sample_task(task_factory) -> Task:
    """Create a single sample task for tests that need one task."""
    return task_factory(
        title="Sample Task",
        description="This is a sample task for testing",
        status=TaskStatus.PENDING.value,
    )


@pytest.fixture
def multiple_tasks(task_factory) -> list[Task]:
    """
    Create several tasks with different statuses.

    Returns:
        List of Task instances in creation order.
    """
    return [
        task_factory(title="First Pending", status=TaskStatus.PENDING.value),
        task_factory(title="Second In Progress", status=TaskStatus.IN_PROGRESS.value),
        task_factory(title="Third Done", status=TaskStatus.DONE.value),
    ]


# -----------------------------------------------------------------------------
# Test Data Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def valid_task_data() -> dict[str, Any]:
    """Provide valid task data for POST/PUT requests."""
    return {
        "title": "Test Task",
        "description": "This is a test task description",
        "status": TaskStatus.IN_PROGRESS.value,
    }


@pytest.fixture
def minimal_task_data() -> dict[str, str]:
    """Provide minimal valid task data (only required fields)."""
    return {"title": "Minimal Task"}


@pytest.fixture
def missing_task_id() -> str:
    """A well-formed id that no stored task uses."""
    return "0123456789abcdef01234567"


@pytest.fixture
def api_headers() -> dict[str, str]:
    """Provide common headers for API requests."""
    return {
        "Content-Type": "application/json",
        "Accept": "application/json"
    }
