from __future__ import annotations

from typing import Any, ClassVar, List, Tuple

from attr import frozen, field, Attribute

from fix_plugin_azure_mssql.errors import ValidationError

# A segment is either a static name (fixed text in the path) or a user supplied value.
Segment = Tuple[bool, str]
StaticSegment = True
UserSegment = False


def _valid_segment(_: Any, attribute: Attribute, value: Any) -> None:  # type: ignore
    if not isinstance(value, str) or not value:
        raise ValidationError(f"`{attribute.name}` must be a non empty string, got {value!r}")
    if "/" in value:
        raise ValidationError(f"`{attribute.name}` must not contain a slash, got {value!r}")


def parse_segments(kind: str, segments: List[Segment], input_id: str, insensitively: bool = False) -> List[str]:
    """
    Split the given resource id into its parts and check every static part.
    Returns the user supplied values in the order of their definition.
    """
    if not isinstance(input_id, str) or not input_id.startswith("/"):
        raise ValidationError(f"parsing {input_id!r}: a {kind} ID has to start with a slash")
    parts = input_id.strip("/").split("/")
    if len(parts) != len(segments):
        raise ValidationError(
            f"parsing {input_id!r}: expected {len(segments)} segments within the {kind} ID but got {len(parts)}. "
            f"Expected a {kind} ID that matched: {example_id(segments)}"
        )
    values = []
    for pos, (part, (static, name)) in enumerate(zip(parts, segments)):
        if static:
            matches = part.lower() == name.lower() if insensitively else part == name
            if not matches:
                raise ValidationError(
                    f"parsing {input_id!r}: the segment at position {pos} didn't match. Expected {name!r} got {part!r}"
                )
        elif not part:
            raise ValidationError(f"parsing {input_id!r}: the segment {name!r} must not be empty")
        else:
            values.append(part)
    return values


def example_id(segments: List[Segment]) -> str:
    return "/" + "/".join(name if static else "{" + name + "}" for static, name in segments)


@frozen
class JobAgentId:
    kind: ClassVar[str] = "Job Agent"
    segments: ClassVar[List[Segment]] = [
        (StaticSegment, "subscriptions"),
        (UserSegment, "subscriptionId"),
        (StaticSegment, "resourceGroups"),
        (UserSegment, "resourceGroupName"),
        (StaticSegment, "providers"),
        (StaticSegment, "Microsoft.Sql"),
        (StaticSegment, "servers"),
        (UserSegment, "serverName"),
        (StaticSegment, "jobAgents"),
        (UserSegment, "jobAgentName"),
    ]
    subscription_id: str = field(validator=_valid_segment)
    resource_group_name: str = field(validator=_valid_segment)
    server_name: str = field(validator=_valid_segment)
    job_agent_name: str = field(validator=_valid_segment)

    @classmethod
    def parse(cls, input_id: str, insensitively: bool = False) -> JobAgentId:
        return cls(*parse_segments(cls.kind, cls.segments, input_id, insensitively))

    def id(self) -> str:
        return (
            f"/subscriptions/{self.subscription_id}/resourceGroups/{self.resource_group_name}"
            f"/providers/Microsoft.Sql/servers/{self.server_name}/jobAgents/{self.job_agent_name}"
        )

    def credential(self, name: str) -> JobCredentialId:
        return JobCredentialId(self.subscription_id, self.resource_group_name, self.server_name, self.job_agent_name, name)

    def __str__(self) -> str:
        return (
            f"Job Agent (Subscription: {self.subscription_id!r}, Resource Group Name: {self.resource_group_name!r}, "
            f"Server Name: {self.server_name!r}, Job Agent Name: {self.job_agent_name!r})"
        )


@frozen
class JobCredentialId:
    kind: ClassVar[str] = "Credential"
    segments: ClassVar[List[Segment]] = JobAgentId.segments + [
        (StaticSegment, "credentials"),
        (UserSegment, "credentialName"),
    ]
    subscription_id: str = field(validator=_valid_segment)
    resource_group_name: str = field(validator=_valid_segment)
    server_name: str = field(validator=_valid_segment)
    job_agent_name: str = field(validator=_valid_segment)
    credential_name: str = field(validator=_valid_segment)

    @classmethod
    def parse(cls, input_id: str, insensitively: bool = False) -> JobCredentialId:
        return cls(*parse_segments(cls.kind, cls.segments, input_id, insensitively))

    @property
    def job_agent_id(self) -> JobAgentId:
        return JobAgentId(self.subscription_id, self.resource_group_name, self.server_name, self.job_agent_name)

    def id(self) -> str:
        return f"{self.job_agent_id.id()}/credentials/{self.credential_name}"

    def __str__(self) -> str:
        return (
            f"Credential (Subscription: {self.subscription_id!r}, Resource Group Name: {self.resource_group_name!r}, "
            f"Server Name: {self.server_name!r}, Job Agent Name: {self.job_agent_name!r}, "
            f"Credential Name: {self.credential_name!r})"
        )


def validate_job_agent_id(value: Any, key: str) -> List[str]:
    if not isinstance(value, str):
        return [f"expected type of {key!r} to be string"]
    try:
        JobAgentId.parse(value)
        return []
    except ValidationError as e:
        return [str(e)]
