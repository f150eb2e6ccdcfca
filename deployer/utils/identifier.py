"""
Identifier helpers: pipeline ID normalisation and run correlation IDs
"""
import random
import re

from deployer.exceptions import InvalidIdentifierError

_WHITESPACE = re.compile(r"\s")


def normalize_pipeline_id(pipeline_id: str) -> str:
    """
    Clean a raw pipeline ID so it can be used as a single URL path segment.

    - every `/` becomes `-`
    - every whitespace character becomes `_`

    Nothing else is altered, e.g. "Org/My Repo" -> "Org-My_Repo".

    Args:
        pipeline_id: uncleaned pipeline ID

    Returns:
        str: cleaned pipeline ID

    Raises:
        InvalidIdentifierError: If pipeline_id is not a string
    """
    if not isinstance(pipeline_id, str):
        raise InvalidIdentifierError(f"Pipeline ID must be a string, got {type(pipeline_id).__name__}")

    return _WHITESPACE.sub("_", pipeline_id.replace("/", "-"))


def generate_correlation_id() -> str:
    """
    Generate a numeric correlation ID for tracking a single run in the logs

    Returns:
        str: Correlation ID (8 digits)
    """
    return str(random.randint(10000000, 99999999))
