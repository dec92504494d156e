import os

import pytest

os.environ["NAHW_LOG_INTERACTIONS"] = "0"

from nahw.main import app


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c
