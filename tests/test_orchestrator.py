import pytest
import yaml
from unittest.mock import MagicMock

from deployer.components.environ.env_resolver import EnvResolver
from deployer.components.remote.client import PipelineClient
from deployer.orchestrator.orchestrator import PipelineOrchestrator


PIPELINE = """id: old
stages:
  - scriptRef: s.js
envs:
  token: ${{ TOK }}
"""


def make_response(status_code, body):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    response.text = str(body)
    return response


# Fixtures
@pytest.fixture
def project(tmp_path):
    pipeline = tmp_path / "pipeline.yaml"
    pipeline.write_text(PIPELINE)
    (tmp_path / "s.js").write_text("function handleRequest() { return {} }")
    return tmp_path


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def orchestrator(session):
    client = PipelineClient(timeout=5, session=session)
    return PipelineOrchestrator(client=client, env_resolver=EnvResolver(provider={"INPUT_TOK": "abc"}.get))


def calls(session):
    return [(c.args[0], c.args[1]) for c in session.request.call_args_list]


# Tests
def test_creates_when_pipeline_absent(project, session, orchestrator):
    session.request.side_effect = [make_response(404, {}), make_response(201, {"acknowledged": True})]
    pipeline = project / "pipeline.yaml"

    result = orchestrator.run("https://host", "Org/Repo", str(pipeline), {})

    assert result["success"] is True
    assert result["pipeline_id"] == "Org-Repo"
    assert result["action"] == "create"
    assert result["completed_steps"] == ["fetch", "resolve", "validate", "mutate", "build", "create"]
    assert calls(session) == [
        ("GET", "https://host/_pipeline/Org-Repo"),
        ("POST", "https://host/_pipeline"),
    ]

    on_disk = yaml.safe_load(pipeline.read_text())
    assert on_disk["id"] == "Org-Repo"
    assert on_disk["envs"]["token"] == "abc"

    files = session.request.call_args_list[1].kwargs["files"]
    assert [name for name, _ in files] == ["pipeline", "s.js"]
    assert b"Org-Repo" in files[0][1][1]


def test_updates_when_pipeline_present(project, session, orchestrator):
    session.request.side_effect = [make_response(200, {"id": "Org-Repo"}), make_response(200, {"acknowledged": True})]

    result = orchestrator.run("https://host", "Org/Repo", str(project / "pipeline.yaml"))

    assert result["success"] is True
    assert result["action"] == "update"
    assert calls(session) == [
        ("GET", "https://host/_pipeline/Org-Repo"),
        ("PUT", "https://host/_pipeline/Org-Repo"),
    ]


def test_rejected_update_fails_run(project, session, orchestrator):
    session.request.side_effect = [make_response(200, {"id": "p"}), make_response(400, {"error": "bad script"})]

    result = orchestrator.run("https://host", "p", str(project / "pipeline.yaml"))

    assert result["success"] is False
    assert result["error_type"] == "RemoteRejectedError"
    assert "bad script" in result["error"]


def test_missing_env_value_stops_before_dispatch(project, session):
    session.request.side_effect = [make_response(404, {})]
    orchestrator = PipelineOrchestrator(
        client=PipelineClient(session=session),
        env_resolver=EnvResolver(provider={}.get)
    )

    result = orchestrator.run("https://host", "p", str(project / "pipeline.yaml"))

    assert result["success"] is False
    assert result["error_type"] == "MissingEnvironmentValueError"
    assert "INPUT_TOK" in result["error"]
    assert calls(session) == [("GET", "https://host/_pipeline/p")]


def test_missing_dependency_stops_before_mutation(project, session, orchestrator):
    (project / "s.js").unlink()
    session.request.side_effect = [make_response(404, {})]

    result = orchestrator.run("https://host", "p", str(project / "pipeline.yaml"))

    assert result["success"] is False
    assert result["error_type"] == "PipelineFileNotFoundError"
    assert "s.js" in result["error"]
    # The file is untouched when validation fails
    assert (project / "pipeline.yaml").read_text() == PIPELINE


def test_unexpected_fetch_status_fails_run(project, session, orchestrator):
    session.request.side_effect = [make_response(500, {"error": "down"})]

    result = orchestrator.run("https://host", "p", str(project / "pipeline.yaml"))

    assert result["success"] is False
    assert result["error_type"] == "RemoteUnexpectedError"
    assert result["completed_steps"] == []


def test_explicit_depends_are_uploaded(project, session, orchestrator):
    (project / "other.js").write_text("x")
    session.request.side_effect = [make_response(404, {}), make_response(201, {})]

    result = orchestrator.run(
        "https://host", "p", str(project / "pipeline.yaml"), {"custom": str(project / "other.js")}
    )

    assert result["success"] is True
    files = session.request.call_args_list[1].kwargs["files"]
    assert [name for name, _ in files] == ["pipeline", "custom"]
