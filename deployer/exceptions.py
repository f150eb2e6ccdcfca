"""
Custom exceptions for Pipeline Deployer
"""

from typing import Any, Optional


class PipelineDeployerError(Exception):
    """Base exception for all pipeline deployer errors"""
    pass

class MissingInputError(PipelineDeployerError):
    """Raised when a required invocation input is absent"""
    pass

class InvalidIdentifierError(PipelineDeployerError):
    """Raised when a pipeline ID cannot be normalised"""
    pass

class PipelineFileNotFoundError(PipelineDeployerError, FileNotFoundError):
    """Raised when the pipeline file or a dependency file is missing"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path

class InvalidFormatError(PipelineDeployerError):
    """Raised when the pipeline file has the wrong extension or is not valid YAML"""
    pass

class MissingEnvironmentValueError(PipelineDeployerError):
    """Raised when a placeholder references an environment key that is not set"""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key

class RemoteError(PipelineDeployerError):
    """Base for errors returned by the pipeline API"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

class RemoteRejectedError(RemoteError):
    """Raised when a create/update call returns a non success status"""
    pass

class RemoteUnexpectedError(RemoteError):
    """Raised when the existence check fails with anything other than 404"""
    pass

class ConfigurationError(PipelineDeployerError):
    """Raised when configuration is invalid"""
    pass
