from __future__ import annotations

import logging
from typing import ClassVar, Dict, Optional

from attr import define, field

from fix_plugin_azure_mssql.azure_client import AzureResourceSpec, MicrosoftClient
from fix_plugin_azure_mssql.resource.base import ApiModel, without_none
from fix_plugin_azure_mssql.resource_ids import JobCredentialId
from fix_plugin_azure_mssql.timeouts import Deadline
from fixlib.json_bender import Bender, S, Bend
from fixlib.types import Json

log = logging.getLogger("fix.plugins.azure_mssql")
service_name = "sql"


@define(eq=False, slots=False)
class AzureSqlServerJobCredentialProperties(ApiModel):
    mapping: ClassVar[Dict[str, Bender]] = {
        "username": S("username"),
        "password": S("password"),
    }
    username: Optional[str] = field(default=None, metadata={"description": "The credential user name."})
    # never returned by the API
    password: Optional[str] = field(default=None, metadata={"description": "The credential password."})

    def to_api(self) -> Json:
        return without_none({"username": self.username, "password": self.password})


@define(eq=False, slots=False)
class AzureSqlServerJobCredential(ApiModel):
    mapping: ClassVar[Dict[str, Bender]] = {
        "id": S("id"),
        "name": S("name"),
        "type": S("type"),
        "properties": S("properties") >> Bend(AzureSqlServerJobCredentialProperties.mapping),
    }
    id: Optional[str] = field(default=None, metadata={"description": "Resource ID."})
    name: Optional[str] = field(default=None, metadata={"description": "Resource name."})
    type: Optional[str] = field(default=None, metadata={"description": "Resource type."})
    properties: Optional[AzureSqlServerJobCredentialProperties] = field(default=None, metadata={'description': 'Properties of a job credential.'})  # fmt: skip

    def to_api(self) -> Json:
        return without_none({"name": self.name, "properties": self.properties.to_api() if self.properties else None})


class JobCredentialsClient:
    """
    Access job credentials of an elastic job agent.
    Absence of a credential is reported via azure.core.exceptions.ResourceNotFoundError.
    """

    api_spec: ClassVar[AzureResourceSpec] = AzureResourceSpec(
        service=service_name,
        version="2023-08-01-preview",
        path="/subscriptions/{subscriptionId}/resourceGroups/{resourceGroupName}/providers/Microsoft.Sql/servers/{serverName}/jobAgents/{jobAgentName}/credentials/{credentialName}",  # noqa: E501
        path_parameters=["subscriptionId", "resourceGroupName", "serverName", "jobAgentName", "credentialName"],
    )

    def __init__(self, client: MicrosoftClient) -> None:
        self.client = client

    @staticmethod
    def _path_args(cid: JobCredentialId) -> Dict[str, str]:
        return dict(
            subscriptionId=cid.subscription_id,
            resourceGroupName=cid.resource_group_name,
            serverName=cid.server_name,
            jobAgentName=cid.job_agent_name,
            credentialName=cid.credential_name,
        )

    def get(self, cid: JobCredentialId, deadline: Optional[Deadline] = None) -> Optional[AzureSqlServerJobCredential]:
        """
        Returns the credential, or None if the service answered with a body that could not be understood.
        """
        js = self.client.get(self.api_spec, deadline, **self._path_args(cid))
        return AzureSqlServerJobCredential.from_api(js)

    def create_or_update(
        self, cid: JobCredentialId, credential: AzureSqlServerJobCredential, deadline: Optional[Deadline] = None
    ) -> Optional[AzureSqlServerJobCredential]:
        js = self.client.put(self.api_spec, credential.to_api(), deadline, **self._path_args(cid))
        return AzureSqlServerJobCredential.from_api(js)

    def delete(self, cid: JobCredentialId, deadline: Optional[Deadline] = None) -> None:
        self.client.delete(self.api_spec, deadline, **self._path_args(cid))
