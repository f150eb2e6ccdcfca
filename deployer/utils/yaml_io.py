"""
Pipeline YAML loading and writing.
"""

import os
from typing import Any, Dict, Optional

import yaml

from deployer.exceptions import InvalidFormatError, PipelineFileNotFoundError
from deployer.utils.logger import get_logger

logger = get_logger(__name__, "PipelineYAML")


def _preprocess_yaml(yaml_content: str) -> str:
    """Strip a UTF-8 BOM and surrounding whitespace."""
    return yaml_content.encode("utf-8").decode("utf-8-sig").strip()


def load_document(path: str, correlation_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Read and parse a pipeline YAML file.

    Args:
        path: Pipeline file path
        correlation_id: Request correlation ID

    Returns:
        Parsed pipeline document

    Raises:
        PipelineFileNotFoundError: If the file does not exist
        InvalidFormatError: If the content is not a YAML mapping
    """
    if not os.path.isfile(path):
        raise PipelineFileNotFoundError(f"Pipeline file not found: {path}", path=path)

    with open(path, "r", encoding="utf-8") as f:
        content = _preprocess_yaml(f.read())

    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error in {path}: {e}", correlation_id=correlation_id)
        raise InvalidFormatError(f"Pipeline file {path} is not valid YAML: {e}") from e

    if document is None:
        raise InvalidFormatError(f"Pipeline file {path} is empty")

    if not isinstance(document, dict):
        raise InvalidFormatError(
            f"Pipeline file {path} must contain a mapping, got {type(document).__name__}"
        )

    logger.debug(
        f"Parsed pipeline document with {len(document)} top-level keys",
        correlation_id=correlation_id
    )
    return document


def dump_document(document: Dict[str, Any], path: str, correlation_id: Optional[str] = None) -> None:
    """
    Serialise a pipeline document back to disk, keeping key order.
    """
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            document,
            f,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True
        )
    logger.debug(f"Wrote pipeline document to {path}", correlation_id=correlation_id)
