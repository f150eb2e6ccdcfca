"""
Workflow routing functions
"""

from typing import Literal

from deployer.components.remote.fetcher import ACTION_CREATE, ACTION_UPDATE
from deployer.orchestrator.state import PipelineState
from deployer.utils.logger import get_logger

logger = get_logger(__name__, "PipelineNodes")


def should_continue(state: PipelineState) -> Literal["continue", "end"]:
    """Stop the workflow as soon as a step has recorded an error."""
    if state.get("error"):
        logger.debug(
            f"Stopping workflow after error: {state['error']}",
            correlation_id=state.get("correlation_id")
        )
        return "end"
    return "continue"


def route_dispatch(state: PipelineState) -> Literal["create", "update", "end"]:
    """
    Pick the write call planned by the fetch step.

    A missing pipeline is created, an existing one updated.
    """
    if should_continue(state) == "end":
        return "end"

    action = state.get("action")
    if action not in (ACTION_CREATE, ACTION_UPDATE):
        logger.error(f"No dispatch action planned (got {action!r})", correlation_id=state.get("correlation_id"))
        return "end"
    return action
