"""
Dependency Resolver - Maps stage script references to files next to the pipeline.

Every stage may carry a `scriptRef`. Relative references are resolved against
the directory of the pipeline file. References starting with the path
separator are rooted at the project, not the filesystem: `/test.js` -> `./test.js`.
"""

import os
from typing import Any, Dict, List, Optional

from deployer.components.base_service import BaseService
from deployer.utils.logger import get_logger
from deployer.utils.yaml_io import load_document

logger = get_logger(__name__, "DependencyResolver")


class DependencyResolver(BaseService):
    """Resolves the script dependencies declared by a pipeline document."""

    SCRIPT_REF_KEY = "scriptRef"

    def __init__(self):
        """Initialize DependencyResolver."""
        super().__init__(step_name="resolve")
        logger.debug("Initialised DependencyResolver", correlation_id="INIT")

    def run(
        self,
        pipeline_file: str,
        overrides: Optional[Dict[str, str]] = None,
        correlation_id: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Build the dependency map for a pipeline file.

        Args:
            pipeline_file: Path to the pipeline YAML
            overrides: Explicit reference -> path map; when non-empty it is
                       used as-is and automatic resolution is skipped
            correlation_id: Request correlation ID

        Returns:
            Mapping of reference (as written) -> file path

        Raises:
            PipelineFileNotFoundError: If the pipeline file does not exist
            InvalidFormatError: If the pipeline file cannot be parsed
        """
        if overrides:
            logger.info(
                f"Using {len(overrides)} explicit dependencies, skipping automatic resolution",
                correlation_id=correlation_id
            )
            return dict(overrides)

        document = load_document(pipeline_file, correlation_id)
        references = self.extract_references(document)
        dependencies = self.resolve_references(references, pipeline_file)

        logger.info(
            f"Resolved {len(dependencies)} dependencies for {pipeline_file}",
            correlation_id=correlation_id
        )
        return dependencies

    def _execute(self, state: Dict[str, Any]) -> Dict[str, Any]:
        state["dependencies"] = self.run(
            pipeline_file=state["pipeline_file"],
            overrides=state.get("depends"),
            correlation_id=state.get("correlation_id")
        )
        return state

    def extract_references(self, document: Dict[str, Any]) -> List[str]:
        """
        Collect the distinct script references of all stages, in order.

        Args:
            document: Parsed pipeline document

        Returns:
            List of scriptRef values; empty when there are no stages
        """
        references: List[str] = []
        for stage in document.get("stages") or []:
            if not isinstance(stage, dict):
                continue
            ref = stage.get(self.SCRIPT_REF_KEY)
            if isinstance(ref, str) and ref and ref not in references:
                references.append(ref)
        return references

    def resolve_references(self, references: List[str], pipeline_file: str) -> Dict[str, str]:
        """
        Resolve each reference to a path.

        Args:
            references: scriptRef values
            pipeline_file: Path to the pipeline YAML

        Returns:
            Mapping of reference -> resolved path, in reference order
        """
        base_dir = os.path.dirname(pipeline_file)
        resolved: Dict[str, str] = {}

        for ref in references:
            if ref.startswith(os.sep):
                resolved[ref] = "." + ref
            else:
                resolved[ref] = os.path.join(base_dir, ref)

        return resolved

    def read_routes(self, document: Dict[str, Any]) -> List[str]:
        """
        Read the route paths declared by the pipeline.

        Args:
            document: Parsed pipeline document

        Returns:
            List of route paths; empty when there are no routes
        """
        return [
            route["path"]
            for route in document.get("routes") or []
            if isinstance(route, dict) and route.get("path")
        ]
