import pytest
from rest_framework.test import APIClient

from study.dashboard import DashboardAggregator
from study.services import StudyResultRecorder

from .fakes import TODAY, InMemoryDatastore


@pytest.fixture
def store():
    return InMemoryDatastore()


@pytest.fixture
def recorder(store):
    return StudyResultRecorder(store, today=lambda: TODAY)


@pytest.fixture
def aggregator(store):
    return DashboardAggregator(store, today=lambda: TODAY)


@pytest.fixture
def api():
    """API client authenticated as u-1 through the gateway header."""
    c = APIClient()
    c.credentials(HTTP_X_USER_ID="u-1")
    return c
