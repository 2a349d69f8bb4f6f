from typing import Dict

from fix_plugin_azure_mssql.resource.base import Resource
from fix_plugin_azure_mssql.resource.mssql_job_credential import MsSqlJobCredentialResource

__version__ = "0.1.0"

# all resource types by their type name
resources: Dict[str, Resource] = {
    MsSqlJobCredentialResource.type_name: MsSqlJobCredentialResource,
}
