import pytest
import yaml

from deployer.components.environ.env_resolver import EnvResolver
from deployer.components.mutate.mutator import Mutator
from deployer.exceptions import MissingEnvironmentValueError


# Fixture
@pytest.fixture
def mutator():
    env = {"INPUT_SECRET": "hunter2", "INPUT_TOK": "abc"}
    return Mutator(env_resolver=EnvResolver(provider=env.get))


PIPELINE = """id: old
enabled: true
routes:
  - path: /search
    method: POST
stages:
  - use: authorization
  - scriptRef: s.js
envs:
  token: ${{ TOK }}
  index: books
global_envs:
  - key: SECRET
    value: ${{ secret }}
    label: Secret
"""


# Tests
def test_run_rewrites_file(tmp_path, mutator):
    path = tmp_path / "pipeline.yaml"
    path.write_text(PIPELINE)

    document = mutator.run(str(path), "Org-Repo")

    on_disk = yaml.safe_load(path.read_text())
    assert on_disk == document
    assert on_disk["id"] == "Org-Repo"
    assert on_disk["envs"] == {"token": "abc", "index": "books"}
    assert on_disk["global_envs"][0]["value"] == "hunter2"
    # Untouched fields survive the rewrite
    assert on_disk["enabled"] is True
    assert on_disk["routes"] == [{"path": "/search", "method": "POST"}]
    assert on_disk["stages"] == [{"use": "authorization"}, {"scriptRef": "s.js"}]
    assert list(on_disk)[0] == "id"


def test_inject_identifier_is_idempotent(mutator):
    document = {"id": "old", "stages": []}
    mutator.inject_identifier(document, "new")
    once = dict(document)
    mutator.inject_identifier(document, "new")
    assert document == once == {"id": "new", "stages": []}


def test_inject_identifier_adds_missing_id(mutator):
    assert mutator.inject_identifier({}, "new") == {"id": "new"}


def test_resolve_document_envs_without_env_sections(mutator):
    document = {"id": "x"}
    assert mutator.resolve_document_envs(document) == {"id": "x"}


def test_run_missing_env_value_aborts(tmp_path):
    """The placeholder is never left in place silently."""
    path = tmp_path / "pipeline.yaml"
    path.write_text("id: old\nenvs:\n  key: ${{ MISSING }}\n")
    mutator = Mutator(env_resolver=EnvResolver(provider={}.get))

    with pytest.raises(MissingEnvironmentValueError):
        mutator.run(str(path), "new")


def test_rerun_is_a_noop(tmp_path, mutator):
    """Resolved values are no longer placeholders."""
    path = tmp_path / "pipeline.yaml"
    path.write_text(PIPELINE)
    mutator.run(str(path), "Org-Repo")
    first = path.read_text()
    mutator.run(str(path), "Org-Repo")
    assert path.read_text() == first
