import pytest

from conftest import InMemoryMicrosoftClient, credential_id, job_agent_id, load_json
from fix_plugin_azure_mssql.clients import Clients
from fix_plugin_azure_mssql.errors import InconsistentStateError, ValidationError, RemoteError
from fix_plugin_azure_mssql.resource.mssql_job_credential import MsSqlJobCredentialResource as resource
from fixlib.types import Json


def test_apply_creates(clients: Clients, azure_client: InMemoryMicrosoftClient, credential_config: Json) -> None:
    d = resource.apply(clients, credential_config)
    assert d.id == credential_id
    assert d.state() == {
        "name": "cred0",
        "job_agent_id": job_agent_id,
        "username": "myuser",
        "password": "Passw0rd!",
        "password_wo_version": 0,
    }


def test_apply_rejects_invalid_config(clients: Clients, azure_client: InMemoryMicrosoftClient) -> None:
    config = {"name": "cred0", "job_agent_id": job_agent_id, "username": "u", "password": "p", "password_wo": "x"}
    with pytest.raises(ValidationError):
        resource.apply(clients, config)
    assert azure_client.calls == []


def test_apply_without_changes(clients: Clients, azure_client: InMemoryMicrosoftClient, credential_config: Json) -> None:
    prior = resource.apply(clients, credential_config)
    azure_client.calls.clear()
    d = resource.apply(clients, credential_config, prior.state(), prior.id)
    assert d.id == prior.id
    assert azure_client.calls == []


def test_apply_updates(clients: Clients, azure_client: InMemoryMicrosoftClient, credential_config: Json) -> None:
    prior = resource.apply(clients, credential_config)
    azure_client.calls.clear()
    d = resource.apply(clients, {**credential_config, "username": "other"}, prior.state(), prior.id)
    assert d.get("username") == "other"
    assert [c[0] for c in azure_client.calls] == ["GET", "PUT", "GET"]
    assert azure_client.resources[credential_id]["properties"]["username"] == "other"


def test_apply_switch_to_write_only_password(
    clients: Clients, azure_client: InMemoryMicrosoftClient, credential_config: Json, write_only_config: Json
) -> None:
    prior = resource.apply(clients, credential_config)
    d = resource.apply(clients, write_only_config, prior.state(), prior.id)
    state = d.state()
    assert state is not None
    # the plain password is not configured anymore
    assert state["password"] is None
    assert state["password_wo_version"] == 1
    assert azure_client.secrets[credential_id] == "Secr3t!"


def test_apply_switch_back_to_write_only_password(
    clients: Clients, azure_client: InMemoryMicrosoftClient, credential_config: Json, write_only_config: Json
) -> None:
    first = resource.apply(clients, write_only_config)
    second = resource.apply(clients, credential_config, first.state(), first.id)
    assert second.get("password_wo_version") == 0
    assert azure_client.secrets[credential_id] == "Passw0rd!"

    azure_client.calls.clear()
    # same version as before the switch to the plain password
    third = resource.apply(clients, {**write_only_config, "password_wo": "NewSecr3t"}, second.state(), second.id)
    assert len(azure_client.calls_of("PUT")) == 1
    assert azure_client.secrets[credential_id] == "NewSecr3t"
    assert third.get("password") is None
    assert third.get("password_wo_version") == 1


def test_apply_removes_unset_optional_field(
    clients: Clients, azure_client: InMemoryMicrosoftClient, write_only_config: Json
) -> None:
    prior = resource.apply(clients, write_only_config)
    d = resource.data(clients, {"name": "cred0"}, prior.state(), prior.id)
    assert d.has_change("password_wo_version")
    assert d.get("password_wo_version") == 0
    assert d.has_change("username")
    assert d.get("username") is None


def test_apply_replaces_on_name_change(
    clients: Clients, azure_client: InMemoryMicrosoftClient, credential_config: Json
) -> None:
    prior = resource.apply(clients, credential_config)
    d = resource.apply(clients, {**credential_config, "name": "cred1"}, prior.state(), prior.id)
    assert d.id == f"{job_agent_id}/credentials/cred1"
    assert credential_id not in azure_client.resources
    assert azure_client.secrets[d.id] == "Passw0rd!"


def test_apply_update_of_vanished_object(
    clients: Clients, azure_client: InMemoryMicrosoftClient, credential_config: Json
) -> None:
    prior = resource.apply(clients, credential_config)
    azure_client.resources.clear()
    with pytest.raises(InconsistentStateError):
        resource.apply(clients, {**credential_config, "username": "other"}, prior.state(), prior.id)


def test_refresh(clients: Clients, azure_client: InMemoryMicrosoftClient, credential_config: Json) -> None:
    prior = resource.apply(clients, credential_config)
    azure_client.resources[credential_id]["properties"]["username"] = "changed"
    d = resource.refresh(clients, prior.state(), prior.id)
    assert d is not None
    assert d.get("username") == "changed"
    # not known remotely, kept from the state
    assert d.get("password") == "Passw0rd!"

    azure_client.resources.clear()
    assert resource.refresh(clients, prior.state(), prior.id) is None


def test_destroy(clients: Clients, azure_client: InMemoryMicrosoftClient, credential_config: Json) -> None:
    prior = resource.apply(clients, credential_config)
    resource.destroy(clients, prior.state(), prior.id)
    assert azure_client.resources == {}
    with pytest.raises(RemoteError):
        resource.destroy(clients, prior.state(), prior.id)


def test_import(clients: Clients, azure_client: InMemoryMicrosoftClient) -> None:
    azure_client.resources[credential_id] = load_json("sql", "credentials")
    d = resource.import_state(clients, credential_id)
    assert d.state() == {
        "name": "cred0",
        "job_agent_id": job_agent_id,
        "username": "myuser",
        "password_wo_version": 0,
    }


def test_import_then_set_write_only_password(clients: Clients, azure_client: InMemoryMicrosoftClient) -> None:
    azure_client.resources[credential_id] = load_json("sql", "credentials")
    imported = resource.import_state(clients, credential_id)
    config = {"name": "cred0", "job_agent_id": job_agent_id, "username": "myuser", "password_wo": "Secr3t!"}
    # version 0 is the imported version: nothing to send
    resource.apply(clients, {**config, "password_wo_version": 0}, imported.state(), imported.id)
    assert credential_id not in azure_client.secrets
    resource.apply(clients, {**config, "password_wo_version": 1}, imported.state(), imported.id)
    assert azure_client.secrets[credential_id] == "Secr3t!"


def test_import_invalid_or_missing(clients: Clients, azure_client: InMemoryMicrosoftClient) -> None:
    with pytest.raises(ValidationError):
        resource.import_state(clients, job_agent_id)
    assert azure_client.calls == []
    with pytest.raises(InconsistentStateError, match="non-existent"):
        resource.import_state(clients, credential_id)
