"""
Pipeline Deployment State : Defines the state structure for the workflow
"""

from typing import TypedDict, Optional, Any, Dict, List, Tuple


class PipelineState(TypedDict):
    """Pipeline deployment workflow state"""

    # Core inputs
    url: str
    raw_pipeline_id: str
    pipeline_id: str
    pipeline_file: str
    depends: Dict[str, str]
    correlation_id: str

    # Remote state
    existing_pipeline: Optional[Any]
    action: str  # "create" or "update"

    # Workflow artifacts
    dependencies: Dict[str, str]
    validation_result: Dict[str, Any]
    document: Dict[str, Any]
    payload: List[Tuple[str, Tuple[str, bytes]]]
    response: Optional[Any]

    # Execution tracking
    completed_steps: List[str]
    error: Optional[str]
    error_type: Optional[str]
