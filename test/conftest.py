from __future__ import annotations

import copy
import json
import os
from typing import Any, Dict, List, Optional, Tuple

from azure.core.exceptions import ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from pytest import fixture, MonkeyPatch

from fix_plugin_azure_mssql.azure_client import MicrosoftClient, AzureResourceSpec
from fix_plugin_azure_mssql.clients import Clients
from fix_plugin_azure_mssql.config import AzureMssqlConfig
from fix_plugin_azure_mssql.timeouts import Deadline
from fixlib.types import Json

subscription_id = "00000000-1111-2222-3333-444444444444"
job_agent_id = (
    f"/subscriptions/{subscription_id}/resourceGroups/group1/providers/Microsoft.Sql/servers/server1/jobAgents/agent1"
)
credential_id = f"{job_agent_id}/credentials/cred0"


def load_json(service: str, name: str) -> Json:
    with open(os.path.dirname(__file__) + f"/files/{service}/{name}.json") as f:
        return json.load(f)  # type: ignore


def file_path(name: str) -> str:
    return os.path.dirname(__file__) + f"/files/{name}"


class InMemoryMicrosoftClient(MicrosoftClient):
    """
    Keeps resources in memory, keyed by their path.
    The password of a payload is stored aside and never returned, the way the service treats it.
    A payload without password keeps the stored one.
    """

    def __init__(self, subscription_id: str = subscription_id) -> None:
        self.subscription_id = subscription_id
        self.resources: Dict[str, Json] = {}
        self.secrets: Dict[str, str] = {}
        self.calls: List[Tuple[str, str, Optional[Json]]] = []
        self.failures: Dict[str, Exception] = {}

    def _record(self, method: str, spec: AzureResourceSpec, body: Optional[Json], **kwargs: Any) -> str:
        path = spec.resource_path(self.subscription_id, **kwargs)
        self.calls.append((method, path, copy.deepcopy(body)))
        if error := self.failures.get(method):
            raise error
        return path

    def calls_of(self, method: str) -> List[Tuple[str, str, Optional[Json]]]:
        return [call for call in self.calls if call[0] == method]

    def get(self, spec: AzureResourceSpec, deadline: Optional[Deadline] = None, **kwargs: Any) -> Optional[Json]:
        path = self._record("GET", spec, None, **kwargs)
        if path not in self.resources:
            raise ResourceNotFoundError(f"The requested resource {path} was not found.")
        return copy.deepcopy(self.resources[path])

    def put(
        self, spec: AzureResourceSpec, body: Json, deadline: Optional[Deadline] = None, **kwargs: Any
    ) -> Optional[Json]:
        path = self._record("PUT", spec, body, **kwargs)
        properties = dict(body.get("properties") or {})
        if "password" in properties:
            self.secrets[path] = properties.pop("password")
        self.resources[path] = {
            "id": path,
            "name": body.get("name"),
            "type": "Microsoft.Sql/servers/jobAgents/credentials",
            "properties": properties,
        }
        return copy.deepcopy(self.resources[path])

    def delete(self, spec: AzureResourceSpec, deadline: Optional[Deadline] = None, **kwargs: Any) -> None:
        path = self._record("DELETE", spec, None, **kwargs)
        if path not in self.resources:
            raise ResourceNotFoundError(f"The requested resource {path} was not found.")
        del self.resources[path]
        self.secrets.pop(path, None)


@fixture
def config() -> AzureMssqlConfig:
    return AzureMssqlConfig()


@fixture
def azure_client(monkeypatch: MonkeyPatch) -> InMemoryMicrosoftClient:
    client = InMemoryMicrosoftClient()
    monkeypatch.setattr(MicrosoftClient, "create", lambda *args, **kwargs: client)
    return client


@fixture
def clients(config: AzureMssqlConfig, azure_client: InMemoryMicrosoftClient) -> Clients:
    return Clients(config, DefaultAzureCredential())


@fixture
def credential_config() -> Json:
    return {"name": "cred0", "job_agent_id": job_agent_id, "username": "myuser", "password": "Passw0rd!"}


@fixture
def write_only_config() -> Json:
    return {
        "name": "cred0",
        "job_agent_id": job_agent_id,
        "username": "myuser",
        "password_wo": "Secr3t!",
        "password_wo_version": 1,
    }
