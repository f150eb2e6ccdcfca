"""
Publisher - Pushes the pipeline payload with POST (create) or PUT (update).
"""

from typing import Any, Dict, Optional

from deployer.components.base_service import BaseService
from deployer.components.remote.client import PipelineClient
from deployer.components.remote.fetcher import ACTION_CREATE, ACTION_UPDATE
from deployer.utils.logger import get_logger

logger = get_logger(__name__, "Publisher")


class Publisher(BaseService):
    """
    Dispatches the payload for one action.

    One instance per action, so each shows up as its own workflow step.
    """

    def __init__(self, client: PipelineClient, action: str):
        if action not in (ACTION_CREATE, ACTION_UPDATE):
            raise ValueError(f"Invalid action: {action}. Must be '{ACTION_CREATE}' or '{ACTION_UPDATE}'")
        super().__init__(step_name=action)
        self.client = client
        self.action = action
        logger.debug(f"Initialised Publisher ({action})", correlation_id="INIT")

    def run(
        self,
        url: str,
        payload: Any,
        pipeline_id: str,
        correlation_id: Optional[str] = None
    ) -> Any:
        """
        Send the payload.

        Returns:
            Parsed response body

        Raises:
            RemoteRejectedError: If the API does not accept the write
        """
        if self.action == ACTION_CREATE:
            response = self.client.create(url, payload, correlation_id=correlation_id)
        else:
            response = self.client.update(url, payload, pipeline_id, correlation_id=correlation_id)

        logger.info(
            f"Pipeline '{pipeline_id}' {self.action}d successfully",
            correlation_id=correlation_id
        )
        return response

    def _execute(self, state: Dict[str, Any]) -> Dict[str, Any]:
        state["response"] = self.run(
            url=state["url"],
            payload=state["payload"],
            pipeline_id=state["pipeline_id"],
            correlation_id=state.get("correlation_id")
        )
        return state
