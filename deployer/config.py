"""
Configuration management with environment variables.

Invocation inputs arrive the way GitHub Actions exposes them to a step:
as INPUT_<NAME> environment entries.
"""

import os
import json
from typing import Optional, Dict, Any

import certifi
from dotenv import load_dotenv

from deployer.exceptions import ConfigurationError, InvalidFormatError, MissingInputError
from deployer.utils.logger import get_logger

# Load .env file early (for local/dev)
load_dotenv()

logger = get_logger(__name__, "Configuration")

INPUT_PREFIX = "INPUT_"
DEFAULT_REQUEST_TIMEOUT = 30


def input_env_key(name: str) -> str:
    """
    Map an input/placeholder name to its environment key.

    "pipeline id" -> "INPUT_PIPELINE_ID"
    """
    return INPUT_PREFIX + name.strip().replace(" ", "_").upper()


def get_input(name: str) -> Optional[str]:
    """Read an invocation input, treating blank values as absent."""
    value = os.getenv(input_env_key(name))
    if value is None or not value.strip():
        return None
    return value.strip()


class Config:
    """Application configuration loaded from environment variables."""

    # General
    IS_LOCAL = os.getenv("IS_LOCAL", "false").lower() == "true"

    # Invocation inputs
    URL: Optional[str] = get_input("url")
    PIPELINE_ID: Optional[str] = get_input("pipeline_id") or os.getenv("GITHUB_REPOSITORY")
    FILE: Optional[str] = get_input("file")
    DEPENDS: Optional[str] = get_input("depends")

    # HTTP
    REQUEST_TIMEOUT: Any = os.getenv("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))

    # Application Settings
    LOG_LEVEL: Optional[str] = os.getenv("LOG_LEVEL")
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE")

    # SSL / Certificates
    SSL_CERT_FILE: Optional[str] = os.getenv("SSL_CERT_FILE") or (certifi.where() if IS_LOCAL else None)

    @classmethod
    def reload(cls) -> None:
        """Re-read every setting from the current process environment."""
        cls.IS_LOCAL = os.getenv("IS_LOCAL", "false").lower() == "true"
        cls.URL = get_input("url")
        cls.PIPELINE_ID = get_input("pipeline_id") or os.getenv("GITHUB_REPOSITORY")
        cls.FILE = get_input("file")
        cls.DEPENDS = get_input("depends")
        cls.REQUEST_TIMEOUT = os.getenv("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
        cls.LOG_LEVEL = os.getenv("LOG_LEVEL")
        cls.LOG_FILE = os.getenv("LOG_FILE")
        cls.SSL_CERT_FILE = os.getenv("SSL_CERT_FILE") or (certifi.where() if cls.IS_LOCAL else None)

    # Validation
    @classmethod
    def validate(cls) -> None:
        """Validate required inputs and convert types."""
        required_vars = {
            input_env_key("url"): cls.URL,
            input_env_key("file"): cls.FILE,
            f"{input_env_key('pipeline_id')} (or GITHUB_REPOSITORY)": cls.PIPELINE_ID,
        }

        # Fail fast if any required input is missing
        missing = [name for name, value in required_vars.items() if not value]
        if missing:
            logger.critical(
                "Missing required inputs:\n  - " + "\n  - ".join(missing)
            )
            raise MissingInputError(f"Missing required inputs: {', '.join(missing)}")

        try:
            cls.REQUEST_TIMEOUT = float(cls.REQUEST_TIMEOUT)
        except (TypeError, ValueError) as e:
            logger.critical(f"Invalid REQUEST_TIMEOUT: {cls.REQUEST_TIMEOUT!r}")
            raise ConfigurationError(f"REQUEST_TIMEOUT must be a number, got {cls.REQUEST_TIMEOUT!r}") from e

        if cls.REQUEST_TIMEOUT <= 0:
            raise ConfigurationError(f"REQUEST_TIMEOUT must be positive, got {cls.REQUEST_TIMEOUT}")

        logger.debug("All required inputs validated and types converted successfully")

        if not cls.SSL_CERT_FILE:
            logger.debug("SSL_CERT_FILE not set, using system defaults")

    @staticmethod
    def parse_depends(raw: Optional[str]) -> Dict[str, str]:
        """
        Parse the `depends` input into a reference -> path mapping.

        Args:
            raw: JSON object string, may be empty

        Returns:
            Mapping of explicit overrides (empty when not passed)

        Raises:
            InvalidFormatError: If the value is not a JSON object of strings
        """
        if raw is None or not raw.strip():
            return {}

        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidFormatError(f"depends input is not valid JSON: {e}") from e

        if not isinstance(parsed, dict):
            raise InvalidFormatError(f"depends input must be a JSON object, got {type(parsed).__name__}")

        bad = [k for k, v in parsed.items() if not isinstance(v, str)]
        if bad:
            raise InvalidFormatError(f"depends values must be file paths, invalid entries: {', '.join(bad)}")

        return parsed

    @classmethod
    def get_inputs(cls) -> Dict[str, Any]:
        """Get the invocation inputs."""
        return {
            "url": cls.URL,
            "pipeline_id": cls.PIPELINE_ID,
            "file": cls.FILE,
            "depends": cls.parse_depends(cls.DEPENDS),
        }

    @classmethod
    def get_client_config(cls) -> Dict[str, Any]:
        """Get configuration for the pipeline API client."""
        return {
            "timeout": float(cls.REQUEST_TIMEOUT),
            "verify": cls.SSL_CERT_FILE or True,
        }


config = Config()
