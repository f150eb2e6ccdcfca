"""
Validator - Checks the pipeline file and its dependencies exist before anything is written.
"""

import os
from typing import Dict, Any, Optional

from deployer.components.base_service import BaseService
from deployer.utils.logger import get_logger
from deployer.exceptions import InvalidFormatError, PipelineFileNotFoundError

logger = get_logger(__name__, "Validator")


class Validator(BaseService):
    """
    File validator for a pipeline and its dependencies

    Performs deterministic checks, stopping at the first failure:
    - Pipeline file exists
    - Pipeline file has a YAML extension
    - Every resolved dependency file exists
    """

    ALLOWED_EXTENSIONS = (".yaml", ".yml")

    def __init__(self):
        """Initialize Validator."""
        super().__init__(step_name="validate")
        logger.debug("Initialised Validator", correlation_id="INIT")

    def run(
        self,
        pipeline_file: str,
        dependencies: Optional[Dict[str, str]] = None,
        correlation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Validate the pipeline file and dependency files.

        Args:
            pipeline_file: Path to the pipeline YAML
            dependencies: Mapping of reference -> resolved path
            correlation_id: Request correlation ID

        Returns:
            Dictionary with validation results:
                - valid: Always True (failures raise)
                - reason: Summary message
                - checked: Number of files checked

        Raises:
            PipelineFileNotFoundError: If the pipeline or a dependency file is missing
            InvalidFormatError: If the pipeline file is not .yaml/.yml
        """
        dependencies = dependencies or {}

        # Check 1: Pipeline file exists
        if not os.path.isfile(pipeline_file):
            logger.error(f"Pipeline file not found: {pipeline_file}", correlation_id=correlation_id)
            raise PipelineFileNotFoundError(f"Pipeline file not found: {pipeline_file}", path=pipeline_file)

        # Check 2: Extension
        extension = os.path.splitext(pipeline_file)[1].lower()
        if extension not in self.ALLOWED_EXTENSIONS:
            logger.error(
                f"Invalid pipeline file extension '{extension}' for {pipeline_file}",
                correlation_id=correlation_id
            )
            raise InvalidFormatError(
                f"Pipeline file {pipeline_file} must be one of {', '.join(self.ALLOWED_EXTENSIONS)}, "
                f"got '{extension or 'no extension'}'"
            )

        # Check 3: Dependencies
        for ref, path in dependencies.items():
            if not os.path.isfile(path):
                logger.error(
                    f"Dependency '{ref}' not found at {path}",
                    correlation_id=correlation_id
                )
                raise PipelineFileNotFoundError(f"Dependency '{ref}' not found at {path}", path=path)

        logger.info(
            f"Validation complete: pipeline file and {len(dependencies)} dependencies present",
            correlation_id=correlation_id
        )

        return {
            "valid": True,
            "reason": "Validation passed",
            "checked": len(dependencies) + 1
        }

    def _execute(self, state: Dict[str, Any]) -> Dict[str, Any]:
        state["validation_result"] = self.run(
            pipeline_file=state["pipeline_file"],
            dependencies=state.get("dependencies"),
            correlation_id=state.get("correlation_id")
        )
        return state
