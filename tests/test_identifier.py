import re

import pytest

from deployer.exceptions import InvalidIdentifierError
from deployer.utils.identifier import generate_correlation_id, normalize_pipeline_id


@pytest.mark.parametrize("raw, expected", [
    ("a/b c", "a-b_c"),
    ("Org/Repo", "Org-Repo"),
    ("tab\there", "tab_here"),
    ("//", "--"),
    ("already-clean_id", "already-clean_id"),
    ("", ""),
])
def test_normalize_pipeline_id(raw, expected):
    assert normalize_pipeline_id(raw) == expected


def test_normalize_pipeline_id_leaves_no_slash_or_whitespace():
    result = normalize_pipeline_id(" my org/my repo\n/v2 ")
    assert "/" not in result
    assert not re.search(r"\s", result)


def test_normalize_pipeline_id_rejects_non_string():
    with pytest.raises(InvalidIdentifierError):
        normalize_pipeline_id(None)


def test_generate_correlation_id():
    cid = generate_correlation_id()
    assert len(cid) == 8 and cid.isdigit()
