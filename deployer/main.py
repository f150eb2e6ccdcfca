"""
Pipeline Deployer entrypoint

Creates or updates a pipeline on an instance from a local pipeline file.
Meant to run once per workflow step; inputs come from INPUT_* environment
entries and can be overridden on the command line for local runs.
"""

import argparse
import sys
from typing import List, Optional

from deployer.config import config, Config
from deployer.components.remote.client import PipelineClient
from deployer.exceptions import PipelineDeployerError
from deployer.orchestrator.orchestrator import PipelineOrchestrator
from deployer.utils.logger import setup_logging, get_logger

logger = get_logger(__name__, "PipelineDeployer")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pipeline-deploy",
        description="Create or update a pipeline from a local pipeline file",
    )
    parser.add_argument("--url", help="Instance URL (INPUT_URL)")
    parser.add_argument("--pipeline-id", help="Pipeline ID (INPUT_PIPELINE_ID, defaults to GITHUB_REPOSITORY)")
    parser.add_argument("--file", help="Path to the pipeline YAML (INPUT_FILE)")
    parser.add_argument("--depends", help="JSON object of reference -> path overrides (INPUT_DEPENDS)")
    parser.add_argument("--log-level", help="Log level (LOG_LEVEL)")
    return parser.parse_args(argv)


def apply_overrides(args: argparse.Namespace) -> None:
    """Let command line flags win over environment inputs."""
    if args.url:
        Config.URL = args.url
    if args.pipeline_id:
        Config.PIPELINE_ID = args.pipeline_id
    if args.file:
        Config.FILE = args.file
    if args.depends is not None:
        Config.DEPENDS = args.depends


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(level=args.log_level or config.LOG_LEVEL, log_file=config.LOG_FILE)
    apply_overrides(args)

    try:
        config.validate()
        inputs = config.get_inputs()
    except PipelineDeployerError as e:
        logger.error(f"Invalid inputs: {e}", correlation_id="SYSTEM")
        return 1

    client = PipelineClient(**config.get_client_config())
    orchestrator = PipelineOrchestrator(client=client)
    result = orchestrator.run(
        url=inputs["url"],
        pipeline_id=inputs["pipeline_id"],
        pipeline_file=inputs["file"],
        depends=inputs["depends"],
    )

    correlation_id = result.get("correlation_id")
    if not result.get("success"):
        logger.error(
            f"Pipeline deployment failed: {result.get('error', 'no write call was made')}",
            correlation_id=correlation_id
        )
        return 1

    logger.info(
        f"Pipeline '{result['pipeline_id']}' {result['action']}d",
        correlation_id=correlation_id
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
