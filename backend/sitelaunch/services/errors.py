"""
Error taxonomy for the deployment job orchestrator.

InvalidRequest / NotFound / StoreFailure surface synchronously to the
HTTP caller. GenerationFailure / PublishFailure only ever surface as the
`error` of a failed Job.
"""


class DeploymentError(Exception):
    """Base class for all orchestrator errors."""


class InvalidRequest(DeploymentError):
    pass


class NotFound(DeploymentError):
    pass


class GenerationFailure(DeploymentError):
    pass


class PublishFailure(DeploymentError):
    pass


class StoreFailure(DeploymentError):
    pass


class JobStateError(DeploymentError):
    """Raised when a write would move a Job out of a terminal state."""
