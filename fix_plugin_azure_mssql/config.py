from datetime import timedelta
from typing import ClassVar, Optional, Union

import yaml
from attr import define, field
from azure.identity import DefaultAzureCredential, ClientSecretCredential

from fixlib.json import from_json

AzureCredentials = Union[DefaultAzureCredential, ClientSecretCredential]


@define
class AzureClientSecretConfig:
    kind: ClassVar[str] = "azure_client_secret"
    tenant_id: str = field(metadata={"description": "Azure tenant ID"})
    client_id: str = field(metadata={"description": "Azure client ID"})
    client_secret: str = field(metadata={"description": "Azure client secret"})


@define
class ResourceTimeoutsConfig:
    kind: ClassVar[str] = "azure_resource_timeouts"
    create: Optional[timedelta] = field(default=None, metadata={"description": "Time to wait for a create."})
    read: Optional[timedelta] = field(default=None, metadata={"description": "Time to wait for a read."})
    update: Optional[timedelta] = field(default=None, metadata={"description": "Time to wait for an update."})
    delete: Optional[timedelta] = field(default=None, metadata={"description": "Time to wait for a delete."})


@define
class AzureMssqlConfig:
    kind: ClassVar[str] = "azure_mssql"

    client_secret: Optional[AzureClientSecretConfig] = field(
        default=None,
        metadata={
            "description": "If you can not provide access via the environment, define access with a client secret.\nIf no secret is provided the default credential chain will be used.\nSee https://docs.microsoft.com/en-us/azure/developer/python/azure-sdk-authenticate?tabs=cmd#environment-variables for more information."  # noqa: E501
        },
    )
    timeouts: ResourceTimeoutsConfig = field(
        factory=ResourceTimeoutsConfig,
        metadata={
            "description": "Override the default operation timeouts of all resources.\n"
            "Durations can be defined as string (e.g. 90min, 1h30min) or as number of seconds."
        },
    )

    def credentials(self) -> AzureCredentials:
        if cs := self.client_secret:
            return ClientSecretCredential(
                tenant_id=cs.tenant_id,
                client_id=cs.client_id,
                client_secret=cs.client_secret,
            )

        # Increase the process timeout to ensure proper handling of credentials
        return DefaultAzureCredential(process_timeout=300)


def load_config(path: Optional[str]) -> AzureMssqlConfig:
    """
    Read the configuration from the given yaml file.
    The configuration lives under the `azure_mssql` section, a missing file section yields the defaults.
    """
    if not path:
        return AzureMssqlConfig()
    with open(path) as f:
        js = yaml.safe_load(f) or {}
    return from_json(js.get(AzureMssqlConfig.kind) or {}, AzureMssqlConfig)
