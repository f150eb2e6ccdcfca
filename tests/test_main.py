import pytest
from unittest.mock import patch

from deployer import main as entrypoint
from deployer.config import Config

SETTINGS = ["URL", "PIPELINE_ID", "FILE", "DEPENDS", "REQUEST_TIMEOUT"]


# Fixture
@pytest.fixture(autouse=True)
def restore_config():
    saved = {name: getattr(Config, name) for name in SETTINGS}
    yield
    for name, value in saved.items():
        setattr(Config, name, value)


@pytest.fixture
def pipeline(tmp_path):
    path = tmp_path / "pipeline.yaml"
    path.write_text("id: old\n")
    return path


# Tests
def test_main_exits_zero_on_success(pipeline):
    with patch.object(entrypoint, "PipelineOrchestrator") as mock_orchestrator:
        mock_orchestrator.return_value.run.return_value = {
            "success": True, "correlation_id": "cid", "pipeline_id": "Org-Repo", "action": "create"
        }
        code = entrypoint.main(["--url", "https://host", "--pipeline-id", "Org/Repo", "--file", str(pipeline)])

    assert code == 0
    mock_orchestrator.return_value.run.assert_called_once_with(
        url="https://host", pipeline_id="Org/Repo", pipeline_file=str(pipeline), depends={}
    )


def test_main_exits_non_zero_on_failure(pipeline):
    with patch.object(entrypoint, "PipelineOrchestrator") as mock_orchestrator:
        mock_orchestrator.return_value.run.return_value = {
            "success": False, "correlation_id": "cid", "error": "Create failed: Creating pipeline failed"
        }
        code = entrypoint.main(["--url", "https://host", "--pipeline-id", "p", "--file", str(pipeline)])

    assert code == 1


def test_main_rejects_missing_inputs():
    Config.URL = None
    Config.FILE = None
    Config.PIPELINE_ID = "p"
    with patch.object(entrypoint, "PipelineOrchestrator") as mock_orchestrator:
        code = entrypoint.main([])

    assert code == 1
    mock_orchestrator.assert_not_called()


def test_main_rejects_invalid_depends(pipeline):
    with patch.object(entrypoint, "PipelineOrchestrator") as mock_orchestrator:
        code = entrypoint.main([
            "--url", "https://host", "--pipeline-id", "p", "--file", str(pipeline), "--depends", "[1, 2]"
        ])

    assert code == 1
    mock_orchestrator.assert_not_called()
