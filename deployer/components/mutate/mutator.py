"""
Mutator - Writes the resolved pipeline ID and env values into the pipeline file.

The file is rewritten in place before it is uploaded. The write is not rolled
back if the upload later fails.
"""

from typing import Dict, Any, Optional

from deployer.components.base_service import BaseService
from deployer.components.environ.env_resolver import EnvResolver
from deployer.utils.logger import get_logger
from deployer.utils.yaml_io import dump_document, load_document

logger = get_logger(__name__, "Mutator")


class Mutator(BaseService):
    """Injects the pipeline ID and resolves env placeholders in the pipeline document."""

    def __init__(self, env_resolver: Optional[EnvResolver] = None):
        """
        Initialize Mutator.

        Args:
            env_resolver: Resolver used for placeholders (defaults to one reading os.environ)
        """
        super().__init__(step_name="mutate")
        self.env_resolver = env_resolver or EnvResolver()
        logger.debug("Initialised Mutator", correlation_id="INIT")

    def run(
        self,
        pipeline_file: str,
        pipeline_id: str,
        correlation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Load, mutate and persist the pipeline document.

        Args:
            pipeline_file: Path to the pipeline YAML
            pipeline_id: Normalised pipeline ID
            correlation_id: Request correlation ID

        Returns:
            The mutated document

        Raises:
            PipelineFileNotFoundError: If the file is missing
            InvalidFormatError: If the file is not a YAML mapping
            MissingEnvironmentValueError: If a placeholder cannot be resolved
        """
        document = load_document(pipeline_file, correlation_id)

        self.inject_identifier(document, pipeline_id)
        self.resolve_document_envs(document, correlation_id)

        dump_document(document, pipeline_file, correlation_id)

        logger.info(
            f"Pipeline file {pipeline_file} updated with id '{pipeline_id}'",
            correlation_id=correlation_id
        )
        return document

    def _execute(self, state: Dict[str, Any]) -> Dict[str, Any]:
        state["document"] = self.run(
            pipeline_file=state["pipeline_file"],
            pipeline_id=state["pipeline_id"],
            correlation_id=state.get("correlation_id")
        )
        return state

    def inject_identifier(self, document: Dict[str, Any], pipeline_id: str) -> Dict[str, Any]:
        """Set the top-level `id`, overwriting whatever the file declared."""
        document["id"] = pipeline_id
        return document

    def resolve_document_envs(
        self,
        document: Dict[str, Any],
        correlation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Resolve placeholders in `envs` (mapping) and `global_envs` (list of records)."""
        if isinstance(document.get("envs"), dict):
            self.env_resolver.resolve_env_map(document["envs"], correlation_id)

        if isinstance(document.get("global_envs"), list):
            self.env_resolver.resolve_env_list(document["global_envs"], correlation_id)

        return document
