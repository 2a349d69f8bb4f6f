from enum import Enum
from typing import ClassVar, Dict, List, Optional

from attr import define, field

from fix_plugin_azure_mssql.resource.base import ApiModel, without_none
from fixlib.json_bender import Bender, S, F
from fixlib.types import Json


class PublicIPAddressDnsSettingsDomainNameLabelScope(Enum):
    NoReuse = "NoReuse"
    ResourceGroupReuse = "ResourceGroupReuse"
    SubscriptionReuse = "SubscriptionReuse"
    TenantReuse = "TenantReuse"

    @classmethod
    def possible_values(cls) -> List[str]:
        return [v.value for v in cls]


def parse_domain_name_label_scope(value: str) -> str:
    """
    Returns the canonical spelling of a known scope. Values unknown to this API version are kept as is.
    """
    for scope in PublicIPAddressDnsSettingsDomainNameLabelScope:
        if scope.value.lower() == value.lower():
            return scope.value
    return value


@define(eq=False, slots=False)
class AzurePublicIPAddressDnsSettings(ApiModel):
    mapping: ClassVar[Dict[str, Bender]] = {
        "domain_name_label": S("domainNameLabel"),
        "domain_name_label_scope": S("domainNameLabelScope") >> F(parse_domain_name_label_scope),
        "fqdn": S("fqdn"),
        "reverse_fqdn": S("reverseFqdn"),
    }
    domain_name_label: Optional[str] = field(default=None, metadata={'description': 'The domain name label. The concatenation of the domain name label and the regionalized DNS zone make up the fully qualified domain name associated with the public IP address. If a domain name label is specified, an A DNS record is created for the public IP in the Microsoft Azure DNS system.'})  # fmt: skip
    domain_name_label_scope: Optional[str] = field(default=None, metadata={'description': 'The domain name label scope. If a domain name label and a domain name label scope are specified, an A DNS record is created for the public IP in the Microsoft Azure DNS system with a hashed value includes in FQDN.'})  # fmt: skip
    fqdn: Optional[str] = field(default=None, metadata={'description': 'The Fully Qualified Domain Name of the A DNS record associated with the public IP. This is the concatenation of the domainNameLabel and the regionalized DNS zone.'})  # fmt: skip
    reverse_fqdn: Optional[str] = field(default=None, metadata={'description': 'The reverse FQDN. A user-visible, fully qualified domain name that resolves to this public IP address. If the reverseFqdn is specified, then a PTR DNS record is created pointing from the IP address in the in-addr.arpa domain to the reverse FQDN.'})  # fmt: skip

    def to_api(self) -> Json:
        return without_none(
            {
                "domainNameLabel": self.domain_name_label,
                "domainNameLabelScope": self.domain_name_label_scope,
                "fqdn": self.fqdn,
                "reverseFqdn": self.reverse_fqdn,
            }
        )
