"""
Payload Builder - Assembles the multipart form sent to the pipeline API.

The pipeline file goes under `pipeline`, every dependency under the reference
string it was declared with.
"""

import os
from typing import Any, Dict, List, Optional, Tuple

from deployer.components.base_service import BaseService
from deployer.utils.logger import get_logger

logger = get_logger(__name__, "PayloadBuilder")

PIPELINE_FIELD = "pipeline"

# (field name, (file name, content)) as accepted by requests' `files=`
MultipartPayload = List[Tuple[str, Tuple[str, bytes]]]


class PayloadBuilder(BaseService):
    """Builds the multipart payload for create/update calls."""

    def __init__(self):
        """Initialize PayloadBuilder."""
        super().__init__(step_name="build")
        logger.debug("Initialised PayloadBuilder", correlation_id="INIT")

    def run(
        self,
        pipeline_file: str,
        dependencies: Optional[Dict[str, str]] = None,
        correlation_id: Optional[str] = None
    ) -> MultipartPayload:
        """
        Read the pipeline and dependency files into multipart parts.

        Args:
            pipeline_file: Path to the (already mutated) pipeline YAML
            dependencies: Mapping of reference -> resolved path
            correlation_id: Request correlation ID

        Returns:
            Ordered list of parts; pipeline first, then dependencies in map order
        """
        payload: MultipartPayload = [(PIPELINE_FIELD, self._read_part(pipeline_file))]

        for ref, path in (dependencies or {}).items():
            payload.append((ref, self._read_part(path)))

        total = sum(len(content) for _, (_, content) in payload)
        logger.debug(
            f"Built payload with {len(payload)} parts ({total} bytes)",
            correlation_id=correlation_id
        )
        return payload

    def _execute(self, state: Dict[str, Any]) -> Dict[str, Any]:
        state["payload"] = self.run(
            pipeline_file=state["pipeline_file"],
            dependencies=state.get("dependencies"),
            correlation_id=state.get("correlation_id")
        )
        return state

    def _read_part(self, path: str) -> Tuple[str, bytes]:
        with open(path, "rb") as f:
            return os.path.basename(path), f.read()
