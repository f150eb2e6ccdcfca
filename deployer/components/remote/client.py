"""
Pipeline API client - get/create/update against <instance>/_pipeline
"""

import json
from typing import Any, Optional, Union
from urllib.parse import quote

import requests

from deployer.exceptions import RemoteRejectedError, RemoteUnexpectedError
from deployer.utils.logger import get_logger, sanitize_url

logger = get_logger(__name__, "PipelineClient")


class _Absent:
    """Marker returned by get() when the pipeline does not exist."""

    def __repr__(self) -> str:
        return "PIPELINE_ABSENT"


PIPELINE_ABSENT = _Absent()


class PipelineClient:
    """HTTP client for the pipeline resource of an instance"""

    ENDPOINT = "_pipeline"

    def __init__(
        self,
        timeout: float = 30,
        verify: Union[bool, str] = True,
        session: Optional[requests.Session] = None
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.verify = verify

    def pipeline_url(self, instance_url: str, pipeline_id: Optional[str] = None) -> str:
        """Build `<instance>/_pipeline[/<id>]`."""
        url = f"{instance_url.rstrip('/')}/{self.ENDPOINT}"
        if pipeline_id is not None:
            url = f"{url}/{quote(pipeline_id, safe='')}"
        return url

    def get(
        self,
        instance_url: str,
        pipeline_id: str,
        correlation_id: Optional[str] = None
    ) -> Any:
        """
        Get the pipeline with the passed ID.

        Returns:
            Parsed body of the existing pipeline (which may itself be None),
            or PIPELINE_ABSENT on 404

        Raises:
            RemoteUnexpectedError: On any other non success status or transport failure
        """
        url = self.pipeline_url(instance_url, pipeline_id)
        response = self._request("GET", url, correlation_id=correlation_id)

        if response.status_code == 404:
            logger.info(f"Pipeline '{pipeline_id}' not present", correlation_id=correlation_id)
            return PIPELINE_ABSENT

        body = self._parse_body(response)
        if not 200 <= response.status_code < 300:
            logger.error(
                f"Get call returned {response.status_code}: {self._describe(body)}",
                correlation_id=correlation_id
            )
            raise RemoteUnexpectedError(
                f"Fetching pipeline '{pipeline_id}' failed with status {response.status_code}: {self._describe(body)}",
                status_code=response.status_code,
                body=body
            )

        logger.info(f"Pipeline '{pipeline_id}' exists", correlation_id=correlation_id)
        return body

    def create(
        self,
        instance_url: str,
        payload: Any,
        correlation_id: Optional[str] = None
    ) -> Any:
        """
        Create the pipeline. The ID is picked up from the pipeline file.

        Raises:
            RemoteRejectedError: If the response is not a 201
        """
        url = self.pipeline_url(instance_url)
        response = self._request("POST", url, files=payload, correlation_id=correlation_id)

        # A create is valid only if it returns a 201
        if response.status_code == 201:
            return self._parse_body(response)

        body = self._parse_body(response)
        logger.warning(f"Create call returned non 201 response: {response.status_code}", correlation_id=correlation_id)
        raise RemoteRejectedError(
            f"Creating pipeline failed with response: {self._describe(body)}",
            status_code=response.status_code,
            body=body
        )

    def update(
        self,
        instance_url: str,
        payload: Any,
        pipeline_id: str,
        correlation_id: Optional[str] = None
    ) -> Any:
        """
        Update the pipeline with the passed ID. Existence is checked by the caller.

        Raises:
            RemoteRejectedError: If the response is not a 200
        """
        url = self.pipeline_url(instance_url, pipeline_id)
        response = self._request("PUT", url, files=payload, correlation_id=correlation_id)

        # An update is valid only if it returns a 200
        if response.status_code == 200:
            return self._parse_body(response)

        body = self._parse_body(response)
        logger.warning(f"Update call returned non 200 response: {response.status_code}", correlation_id=correlation_id)
        raise RemoteRejectedError(
            f"Updating pipeline failed with response: {self._describe(body)}",
            status_code=response.status_code,
            body=body
        )

    def _request(self, method: str, url: str, correlation_id: Optional[str] = None, **kwargs) -> requests.Response:
        logger.debug(f"{method} {sanitize_url(url)}", correlation_id=correlation_id)
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            logger.error(f"{method} {sanitize_url(url)} timed out after {self.timeout}s", correlation_id=correlation_id)
            raise RemoteUnexpectedError(f"{method} {sanitize_url(url)} timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            logger.error(f"{method} {sanitize_url(url)} failed: {e}", correlation_id=correlation_id)
            raise RemoteUnexpectedError(f"{method} {sanitize_url(url)} failed: {e}") from e

    def _parse_body(self, response: requests.Response) -> Any:
        """Parse JSON body, falling back to raw text."""
        try:
            return response.json()
        except ValueError:
            return response.text

    def _describe(self, body: Any) -> str:
        if isinstance(body, (dict, list)):
            return json.dumps(body)
        return str(body) if body else "<empty body>"
