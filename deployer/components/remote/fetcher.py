"""
Fetcher - Checks whether the pipeline already exists and plans create vs update.
"""

from typing import Any, Dict, Optional

from deployer.components.base_service import BaseService
from deployer.components.remote.client import PIPELINE_ABSENT, PipelineClient
from deployer.utils.logger import get_logger, sanitize_url

logger = get_logger(__name__, "Fetcher")

ACTION_CREATE = "create"
ACTION_UPDATE = "update"


class Fetcher(BaseService):
    """Fetches the current remote state of a pipeline."""

    def __init__(self, client: PipelineClient):
        super().__init__(step_name="fetch")
        self.client = client
        logger.debug("Initialised Fetcher", correlation_id="INIT")

    def run(
        self,
        url: str,
        pipeline_id: str,
        correlation_id: Optional[str] = None
    ) -> Any:
        """
        Get the existing pipeline.

        Returns:
            The existing pipeline document, or PIPELINE_ABSENT when not present

        Raises:
            RemoteUnexpectedError: If the existence check fails
        """
        logger.debug(
            f"Checking for pipeline '{pipeline_id}' on {sanitize_url(url)}",
            correlation_id=correlation_id
        )
        return self.client.get(url, pipeline_id, correlation_id=correlation_id)

    def _execute(self, state: Dict[str, Any]) -> Dict[str, Any]:
        existing = self.run(
            url=state["url"],
            pipeline_id=state["pipeline_id"],
            correlation_id=state.get("correlation_id")
        )
        if existing is PIPELINE_ABSENT:
            state["existing_pipeline"] = None
            state["action"] = ACTION_CREATE
        else:
            state["existing_pipeline"] = existing
            state["action"] = ACTION_UPDATE

        logger.info(
            f"Planned action for '{state['pipeline_id']}': {state['action']}",
            correlation_id=state.get("correlation_id")
        )
        return state
