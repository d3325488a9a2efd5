import pytest
from fastapi.testclient import TestClient

from ingestor.core.config import Settings
from ingestor.main import create_app


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def settings(data_dir):
    return Settings(DATA_LOCATION=str(data_dir))


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
