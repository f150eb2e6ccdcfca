import pytest
from unittest.mock import MagicMock

from deployer.components.remote.client import PIPELINE_ABSENT
from deployer.components.remote.fetcher import Fetcher
from deployer.components.remote.publisher import Publisher
from deployer.exceptions import RemoteRejectedError


# Fixture
@pytest.fixture
def client():
    return MagicMock()


# Tests
def test_fetch_plans_create_when_absent(client):
    client.get.return_value = PIPELINE_ABSENT
    state = {"url": "https://host", "pipeline_id": "p1", "correlation_id": "cid"}

    updated = Fetcher(client).execute_node(state)
    assert updated["action"] == "create"
    assert updated["existing_pipeline"] is None


def test_fetch_plans_update_when_present(client):
    client.get.return_value = {"id": "p1"}
    state = {"url": "https://host", "pipeline_id": "p1", "correlation_id": "cid"}

    updated = Fetcher(client).execute_node(state)
    assert updated["action"] == "update"
    assert updated["existing_pipeline"] == {"id": "p1"}


def test_fetch_plans_update_when_body_is_null(client):
    """An existing pipeline with a null body is still updated."""
    client.get.return_value = None
    state = {"url": "https://host", "pipeline_id": "p1", "correlation_id": "cid"}

    updated = Fetcher(client).execute_node(state)
    assert updated["action"] == "update"


def test_publisher_create_posts(client):
    Publisher(client, "create").run(url="https://host", payload=["p"], pipeline_id="p1")
    client.create.assert_called_once_with("https://host", ["p"], correlation_id=None)
    client.update.assert_not_called()


def test_publisher_update_puts(client):
    Publisher(client, "update").run(url="https://host", payload=["p"], pipeline_id="p1")
    client.update.assert_called_once_with("https://host", ["p"], "p1", correlation_id=None)
    client.create.assert_not_called()


def test_publisher_rejects_unknown_action(client):
    with pytest.raises(ValueError):
        Publisher(client, "delete")


def test_publisher_records_rejection(client):
    client.update.side_effect = RemoteRejectedError("Updating pipeline failed", status_code=400)
    state = {"url": "https://host", "payload": [], "pipeline_id": "p1", "correlation_id": "cid"}

    updated = Publisher(client, "update").execute_node(state)
    assert updated["error_type"] == "RemoteRejectedError"
    assert "Updating pipeline failed" in updated["error"]
