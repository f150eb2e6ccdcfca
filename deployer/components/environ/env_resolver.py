"""
Environment Resolver - Substitutes ${{ name }} placeholders in pipeline env sections.

Secrets cannot be read directly by the step, so they are proxied through the
step's inputs. A placeholder `${{ my_secret }}` is replaced with the value of
INPUT_MY_SECRET. A placeholder naming a key that is not set is fatal.
"""

import os
import re
from typing import Any, Callable, Dict, List, Optional

from deployer.config import input_env_key
from deployer.exceptions import MissingEnvironmentValueError
from deployer.utils.logger import get_logger

logger = get_logger(__name__, "EnvResolver")

PLACEHOLDER_PATTERN = re.compile(r"\$\{\{\s*([^{}]*?)\s*\}\}")

EnvProvider = Callable[[str], Optional[str]]


def extract_placeholder_name(value: Any) -> str:
    """
    Extract the name enclosed in a `${{ name }}` placeholder.

    Args:
        value: Value from an env section

    Returns:
        The enclosed name, or "" when value is not a placeholder
    """
    if not isinstance(value, str):
        return ""

    match = PLACEHOLDER_PATTERN.fullmatch(value)
    if not match:
        return ""
    return match.group(1)


class EnvResolver:
    """
    Resolves placeholders against an environment namespace.

    The namespace is any callable mapping a key to its value (or None),
    os.environ.get by default.
    """

    def __init__(self, provider: Optional[EnvProvider] = None):
        self.provider = provider or os.environ.get

    def lookup(self, name: str, correlation_id: Optional[str] = None) -> str:
        """
        Look up a placeholder name in the environment namespace.

        Raises:
            MissingEnvironmentValueError: If the key is not set
        """
        key = input_env_key(name)
        value = self.provider(key)
        if value is None:
            logger.error(f"No value found for placeholder '{name}' (expected {key})", correlation_id=correlation_id)
            raise MissingEnvironmentValueError(
                f"Environment value for '{name}' not found, pass it as {key}",
                key=key
            )
        logger.debug(f"Resolved placeholder '{name}' from {key}", correlation_id=correlation_id)
        return value

    def resolve_env_map(
        self,
        envs: Optional[Dict[str, Any]],
        correlation_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Resolve placeholder values of a key -> value mapping in place.

        Args:
            envs: The env section, or None when the document has none

        Returns:
            The same mapping object
        """
        if not envs:
            return envs

        for key, value in envs.items():
            name = extract_placeholder_name(value)
            if name:
                envs[key] = self.lookup(name, correlation_id)

        return envs

    def resolve_env_list(
        self,
        entries: Optional[List[Dict[str, Any]]],
        correlation_id: Optional[str] = None
    ) -> Optional[List[Dict[str, Any]]]:
        """
        Resolve the `value` field of each {key, value} record in place.

        Args:
            entries: List of env records, or None

        Returns:
            The same list object
        """
        if not entries:
            return entries

        for entry in entries:
            if not isinstance(entry, dict):
                continue
            name = extract_placeholder_name(entry.get("value"))
            if name:
                entry["value"] = self.lookup(name, correlation_id)

        return entries
