"""
Pipeline Deployer Orchestrator
"""

from typing import Any, Dict, Optional
from datetime import datetime

from langgraph.graph import StateGraph, END

from deployer.components.depend.dependency_resolver import DependencyResolver
from deployer.components.environ.env_resolver import EnvResolver
from deployer.components.mutate.mutator import Mutator
from deployer.components.payload.builder import PayloadBuilder
from deployer.components.remote.client import PipelineClient
from deployer.components.remote.fetcher import Fetcher, ACTION_CREATE, ACTION_UPDATE
from deployer.components.remote.publisher import Publisher
from deployer.components.validate.validator import Validator
from deployer.orchestrator.nodes import should_continue, route_dispatch
from deployer.orchestrator.state import PipelineState
from deployer.utils.identifier import generate_correlation_id, normalize_pipeline_id
from deployer.utils.logger import get_logger, sanitize_url


logger = get_logger(__name__, "PipelineOrchestrator")

# Linear part of the workflow, in execution order
STEPS = ["fetch", "resolve", "validate", "mutate", "build"]


class PipelineOrchestrator:
    """Reconciles a local pipeline definition with the remote pipeline API."""

    def __init__(
        self,
        client: Optional[PipelineClient] = None,
        env_resolver: Optional[EnvResolver] = None
    ):
        self.client = client or PipelineClient()
        self.steps = {
            "fetch": Fetcher(self.client),
            "resolve": DependencyResolver(),
            "validate": Validator(),
            "mutate": Mutator(env_resolver),
            "build": PayloadBuilder(),
            ACTION_CREATE: Publisher(self.client, ACTION_CREATE),
            ACTION_UPDATE: Publisher(self.client, ACTION_UPDATE),
        }

        self.graph = self._build_graph()

        logger.debug("Initialised Orchestrator", correlation_id="INIT")

    def _build_graph(self) -> StateGraph:
        workflow = StateGraph(PipelineState)

        for name, step in self.steps.items():
            workflow.add_node(name, step.execute_node)

        workflow.set_entry_point(STEPS[0])

        for current, following in zip(STEPS, STEPS[1:]):
            workflow.add_conditional_edges(current, should_continue, {"continue": following, "end": END})

        workflow.add_conditional_edges(
            STEPS[-1],
            route_dispatch,
            {ACTION_CREATE: ACTION_CREATE, ACTION_UPDATE: ACTION_UPDATE, "end": END}
        )
        workflow.add_edge(ACTION_CREATE, END)
        workflow.add_edge(ACTION_UPDATE, END)
        return workflow.compile()

    def run(
        self,
        url: str,
        pipeline_id: str,
        pipeline_file: str,
        depends: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        correlation_id = generate_correlation_id()
        normalized_id = normalize_pipeline_id(pipeline_id)

        logger.info(
            f"Starting pipeline deployment (pipeline_id={normalized_id}, file={pipeline_file}, url={sanitize_url(url)})",
            correlation_id=correlation_id
        )

        initial_state: PipelineState = {
            "url": url,
            "raw_pipeline_id": pipeline_id,
            "pipeline_id": normalized_id,
            "pipeline_file": pipeline_file,
            "depends": depends or {},
            "correlation_id": correlation_id,
            "existing_pipeline": None,
            "action": "",
            "dependencies": {},
            "validation_result": {},
            "document": {},
            "payload": [],
            "response": None,
            "completed_steps": [],
            "error": None,
            "error_type": None,
        }

        start_time = datetime.now()
        try:
            final_state = self.graph.invoke(initial_state)
        except Exception as e:
            logger.exception(f"Workflow failed: {e}", correlation_id=correlation_id)
            return {
                "success": False,
                "correlation_id": correlation_id,
                "pipeline_id": normalized_id,
                "error": str(e),
                "error_type": type(e).__name__,
            }
        duration = (datetime.now() - start_time).total_seconds()

        self._log_summary(final_state, duration)

        result = {
            "success": not final_state.get("error") and final_state.get("action") in final_state["completed_steps"],
            "correlation_id": correlation_id,
            "pipeline_id": normalized_id,
            "action": final_state.get("action"),
            "completed_steps": final_state["completed_steps"],
            "duration": duration,
        }
        if final_state.get("error"):
            result["error"] = final_state["error"]
            result["error_type"] = final_state.get("error_type")
        return result

    def _log_summary(self, state: PipelineState, duration: float) -> None:
        cid = state["correlation_id"]
        logger.info(
            f"Pipeline: {state['pipeline_id']} | Action: {state.get('action') or 'none'} | Duration: {duration:.2f}s",
            correlation_id=cid
        )
        logger.info(
            f"Executed Steps ({len(state['completed_steps'])}): {' | '.join(state['completed_steps'])}",
            correlation_id=cid
        )
