from typing import Dict, Optional

from fix_plugin_azure_mssql.azure_client import MicrosoftClient
from fix_plugin_azure_mssql.config import AzureMssqlConfig, AzureCredentials
from fix_plugin_azure_mssql.resource.sql_server import JobCredentialsClient


class Clients:
    """
    Everything a resource needs to talk to Azure: the configuration and one client per subscription.
    """

    def __init__(self, config: AzureMssqlConfig, credential: Optional[AzureCredentials] = None) -> None:
        self.config = config
        self._credential = credential
        self._clients: Dict[str, MicrosoftClient] = {}

    @property
    def credential(self) -> AzureCredentials:
        if self._credential is None:
            self._credential = self.config.credentials()
        return self._credential

    def microsoft_client(self, subscription_id: str) -> MicrosoftClient:
        if subscription_id not in self._clients:
            self._clients[subscription_id] = MicrosoftClient.create(
                config=self.config, credential=self.credential, subscription_id=subscription_id
            )
        return self._clients[subscription_id]

    def job_credentials(self, subscription_id: str) -> JobCredentialsClient:
        return JobCredentialsClient(self.microsoft_client(subscription_id))
