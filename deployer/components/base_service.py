"""
Base service class with common patterns for workflow integration
"""

from typing import Dict, Any
from abc import ABC, abstractmethod

from deployer.exceptions import PipelineDeployerError
from deployer.utils.logger import get_logger

logger = get_logger(__name__, "BaseService")


class BaseService(ABC):
    """
    Abstract base class for all deployment steps.

    Provides:
    - Workflow integration (execute_node pattern)
    - Completion tracking
    - Error handling
    - Logging

    Subclasses MUST implement:
    - run(**kwargs): Public API
    - _execute(state): Workflow integration
    """

    def __init__(self, step_name: str):
        """
        Initialize service.

        Args:
            step_name: Step identifier (e.g., "fetch", "validate")
        """
        self.step_name = step_name

    @abstractmethod
    def run(self, **kwargs) -> Any:
        """
        Public API for direct service usage (outside workflow).

        Example:
            resolver = DependencyResolver()
            deps = resolver.run(pipeline_file="pipeline.yaml")
        """
        pass

    @abstractmethod
    def _execute(self, state: Dict[str, Any]) -> Dict[str, Any]:
        """
        Internal execution logic for workflow integration.

        Should:
        1. Extract data from state
        2. Call self.run()
        3. Update state with results
        4. Return modified state

        Errors are raised, execute_node records them.
        """
        pass

    def execute_node(self, state: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute service as a workflow node.

        Don't override this method in subclasses.

        Handles:
        - Skip if already completed
        - Skip if previous error
        - Call _execute()
        - Track completion
        - Record errors in state

        Args:
            state: Current workflow state

        Returns:
            Updated workflow state
        """
        correlation_id = state.get("correlation_id")

        completed_steps = state.get("completed_steps", [])
        if self.step_name in completed_steps:
            logger.debug(
                f"{self._format_step_name()} already completed, skipping",
                correlation_id=correlation_id
            )
            return state

        if state.get("error"):
            logger.debug(
                f"Skipping {self.step_name} due to previous error: {state['error']}",
                correlation_id=correlation_id
            )
            return state

        try:
            state = self._execute(state)

            completed_steps = list(state.get("completed_steps", []))
            completed_steps.append(self.step_name)
            state["completed_steps"] = completed_steps

            logger.debug(
                f"{self._format_step_name()} completed successfully",
                correlation_id=correlation_id
            )

        except PipelineDeployerError as e:
            state["error"] = f"{self._format_step_name()} failed: {e}"
            state["error_type"] = type(e).__name__
            logger.error(state["error"], correlation_id=correlation_id)

        except Exception as e:
            state["error"] = f"{self._format_step_name()} failed: {e}"
            state["error_type"] = type(e).__name__
            logger.exception(state["error"], correlation_id=correlation_id)

        return state

    def _format_step_name(self) -> str:
        """
        Format step name for display in logs.

        Returns:
            Formatted step name (e.g., "build_payload" -> "Build Payload")
        """
        return self.step_name.replace("_", " ").title()
