from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Any, Dict, cast

from attr import define, field
from azure.core.exceptions import (
    ClientAuthenticationError,
    ResourceExistsError,
    ResourceNotFoundError,
    map_error,
    HttpResponseError,
)
from azure.core.rest import HttpRequest, HttpResponse
from azure.core.utils import case_insensitive_dict
from azure.mgmt.core.exceptions import ARMErrorFormat
from azure.mgmt.resource import ResourceManagementClient
from retrying import retry

from fix_plugin_azure_mssql.config import AzureMssqlConfig, AzureCredentials
from fix_plugin_azure_mssql.timeouts import Deadline
from fixlib.types import Json

log = logging.getLogger("fix.plugins.azure_mssql")


def is_retryable_exception(e: Exception) -> bool:
    if isinstance(e, HttpResponseError):
        error_code = getattr(getattr(e, "error", None), "code", None)
        status_code = getattr(e, "status_code", None)

        if error_code == "TooManyRequests" or status_code == 429:
            log.debug(f"Azure API request limit exceeded or throttling, retrying with exponential backoff: {e}")
            return True

    return False


ErrorMap = {
    401: ClientAuthenticationError,
    404: ResourceNotFoundError,
    409: ResourceExistsError,
}


@define
class AzureResourceSpec:
    service: str
    path: str
    version: str
    path_parameters: List[str] = []
    expected_status: Dict[str, List[int]] = field(
        factory=lambda: {"GET": [200], "PUT": [200, 201], "DELETE": [200, 204]}
    )

    def resource_path(self, subscription_id: Optional[str], **kwargs: Any) -> str:
        # Construct lookup map used to fill the path parameters
        lookup_map = {"subscriptionId": subscription_id, **kwargs}
        path_map = case_insensitive_dict()
        for param in self.path_parameters:
            if lookup_map.get(param, None) is not None:
                path_map[param] = lookup_map[param]
            else:
                raise KeyError(f"{self.service}:{self.path}: Path parameter {param} was not provided as argument.")
        return self.path.format_map(path_map)

    def request(
        self, client: MicrosoftResourceManagementClient, method: str, body: Optional[Json] = None, **kwargs: Any
    ) -> HttpRequest:
        path = self.resource_path(client.subscription_id, **kwargs)
        url = client.resource_management_client._client.format_url(path)  # pylint: disable=protected-access
        params = {"api-version": self.version}
        return HttpRequest(method=method, url=url, params=params, json=body)

    def action(self, method: str) -> str:
        return f"{method} {self.path}"


class MicrosoftClient(ABC):
    """
    Minimal Azure Resource Manager client: read, write and delete a single resource.
    A missing resource is signalled with azure.core.exceptions.ResourceNotFoundError.
    """

    subscription_id: Optional[str] = None

    @abstractmethod
    def get(self, spec: AzureResourceSpec, deadline: Optional[Deadline] = None, **kwargs: Any) -> Optional[Json]:
        pass

    @abstractmethod
    def put(
        self, spec: AzureResourceSpec, body: Json, deadline: Optional[Deadline] = None, **kwargs: Any
    ) -> Optional[Json]:
        pass

    @abstractmethod
    def delete(self, spec: AzureResourceSpec, deadline: Optional[Deadline] = None, **kwargs: Any) -> None:
        pass

    @staticmethod
    def __create_management_client(
        config: AzureMssqlConfig,
        credential: AzureCredentials,
        subscription_id: str,
    ) -> MicrosoftClient:
        return MicrosoftResourceManagementClient(config, credential, subscription_id)

    create = __create_management_client


class MicrosoftResourceManagementClient(MicrosoftClient):
    def __init__(self, config: AzureMssqlConfig, credential: AzureCredentials, subscription_id: str) -> None:
        self.config = config
        self.credential = credential
        self.subscription_id = subscription_id
        self.resource_management_client = ResourceManagementClient(self.credential, self.subscription_id)

    def get(self, spec: AzureResourceSpec, deadline: Optional[Deadline] = None, **kwargs: Any) -> Optional[Json]:
        return self._call_with_retry(spec, "GET", None, deadline, **kwargs)

    def put(
        self, spec: AzureResourceSpec, body: Json, deadline: Optional[Deadline] = None, **kwargs: Any
    ) -> Optional[Json]:
        return self._call_with_retry(spec, "PUT", body, deadline, **kwargs)

    def delete(self, spec: AzureResourceSpec, deadline: Optional[Deadline] = None, **kwargs: Any) -> None:
        self._call_with_retry(spec, "DELETE", None, deadline, **kwargs)

    @retry(  # type: ignore
        stop_max_attempt_number=10,  # 10 attempts: 1000 max 60000: max wait time is 5 minutes
        wait_exponential_multiplier=1000,
        wait_exponential_max=60000,
        retry_on_exception=is_retryable_exception,
    )
    def _call_with_retry(
        self, spec: AzureResourceSpec, method: str, body: Optional[Json], deadline: Optional[Deadline], **kwargs: Any
    ) -> Optional[Json]:
        try:
            return self._call(spec, method, body, deadline, **kwargs)
        except ClientAuthenticationError as e:
            log.warning(f"[Azure] Authentication failed: {e}. action={spec.action(method)}")
            raise
        except ResourceNotFoundError:
            log.debug(f"[Azure] Resource not found. action={spec.action(method)}")
            raise
        except HttpResponseError as e:
            log.warning(f"[Azure] Client Error: status={e.status_code}, error={e.error}, action={spec.action(method)}")
            raise

    def _call(
        self, spec: AzureResourceSpec, method: str, body: Optional[Json], deadline: Optional[Deadline], **kwargs: Any
    ) -> Optional[Json]:
        run_args: Dict[str, Any] = {}
        if deadline is not None:
            deadline.check(spec.action(method))
            run_args["timeout"] = deadline.remaining()
        request = spec.request(self, method, body, **kwargs)
        response = self._send(request, **run_args)
        # Handle error responses
        if response.status_code not in spec.expected_status.get(method, [200]):
            map_error(status_code=response.status_code, response=response, error_map=ErrorMap)
            raise HttpResponseError(response=response, error_format=ARMErrorFormat)
        if method == "DELETE" or response.status_code == 204 or not response.content:
            return None
        return cast(Json, response.json())

    # noinspection PyProtectedMember
    def _send(self, request: HttpRequest, **kwargs: Any) -> HttpResponse:
        pipeline_response = self.resource_management_client._client._pipeline.run(request, stream=False, **kwargs)
        return cast(HttpResponse, pipeline_response.http_response)
