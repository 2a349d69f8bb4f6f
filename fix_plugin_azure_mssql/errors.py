from typing import List, Optional


class ProvisionError(Exception):
    """Base class of all errors raised while provisioning a resource."""


class ValidationError(ProvisionError):
    """
    Raised when a configuration value or a resource id is malformed.
    Always raised before any call to the remote API is made.
    """

    def __init__(self, message: str, problems: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.problems = problems or [message]


class ImportAsExistsError(ProvisionError):
    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f'A resource with the ID "{resource_id}" already exists - to be managed via this tool this '
            f"resource needs to be imported into the state. Please see the resource documentation for "
            f'"{resource_type}" for more information.'
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InconsistentStateError(ProvisionError):
    """The remote object is missing or incomplete where it is expected to exist."""


class RemoteError(ProvisionError):
    """A call to the remote API failed. The original exception is available as __cause__."""


class DeadlineExceededError(ProvisionError):
    pass
