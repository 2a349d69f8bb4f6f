from __future__ import annotations

import logging
from datetime import timedelta
from typing import Union

from attr import frozen
from azure.core.exceptions import AzureError, ResourceNotFoundError

from fix_plugin_azure_mssql.clients import Clients
from fix_plugin_azure_mssql.errors import ImportAsExistsError, InconsistentStateError, RemoteError, ValidationError
from fix_plugin_azure_mssql.resource.base import Resource
from fix_plugin_azure_mssql.resource.sql_server import (
    AzureSqlServerJobCredential,
    AzureSqlServerJobCredentialProperties,
)
from fix_plugin_azure_mssql.resource_data import ResourceData
from fix_plugin_azure_mssql.resource_ids import JobAgentId, JobCredentialId, validate_job_agent_id
from fix_plugin_azure_mssql.schema import FieldType, Schema, SchemaField
from fix_plugin_azure_mssql.timeouts import ResourceTimeouts

log = logging.getLogger("fix.plugins.azure_mssql")

resource_type = "azurerm_mssql_job_credential"


@frozen
class PlainPassword:
    value: str


@frozen
class WriteOnlyPassword:
    # the version only signals that a new value was supplied and is never sent
    value: str
    version: int


PasswordSource = Union[PlainPassword, WriteOnlyPassword]


def password_source(d: ResourceData) -> PasswordSource:
    if (wo_password := d.get_write_only("password_wo")) is not None:
        return WriteOnlyPassword(wo_password, d.get("password_wo_version"))
    if (password := d.get("password")) is not None:
        return PlainPassword(password)
    raise ValidationError("one of `password,password_wo` must be specified")


def credential_id(d: ResourceData) -> JobCredentialId:
    job_agent_id = JobAgentId.parse(d.get("job_agent_id"))
    return job_agent_id.credential(d.get("name"))


def create(d: ResourceData, meta: Clients) -> None:
    deadline = d.timeouts.for_create()
    log.info("preparing arguments for Job Credential creation.")

    cid = credential_id(d)
    client = meta.job_credentials(cid.subscription_id)

    try:
        client.get(cid, deadline)
    except ResourceNotFoundError:
        pass
    except AzureError as e:
        raise RemoteError(f"checking for presence of existing {cid}: {e}") from e
    else:
        raise ImportAsExistsError(resource_type, cid.id())

    credential = AzureSqlServerJobCredential(
        name=cid.credential_name,
        properties=AzureSqlServerJobCredentialProperties(
            username=d.get("username"),
            password=password_source(d).value,
        ),
    )

    try:
        client.create_or_update(cid, credential, deadline)
    except AzureError as e:
        raise RemoteError(f"creating {cid}: {e}") from e

    d.set_id(cid.id())

    read(d, meta)


def update(d: ResourceData, meta: Clients) -> None:
    deadline = d.timeouts.for_update()
    log.info("preparing arguments for Job Credential update.")

    cid = credential_id(d)
    client = meta.job_credentials(cid.subscription_id)

    try:
        existing = client.get(cid, deadline)
    except ResourceNotFoundError as e:
        raise InconsistentStateError(f"retrieving {cid}: {e}") from e
    except AzureError as e:
        raise RemoteError(f"retrieving {cid}: {e}") from e

    if existing is None:
        raise InconsistentStateError(f"retrieving {cid}: `model` was nil")
    if existing.properties is None:
        raise InconsistentStateError(f"retrieving {cid}: `model.properties` was nil")
    payload = existing

    if d.has_change("username"):
        payload.properties.username = d.get("username")

    if d.has_change("password"):
        payload.properties.password = d.get("password")

    if d.has_change("password_wo_version"):
        if (wo_password := d.get_write_only("password_wo")) is not None:
            payload.properties.password = wo_password

    try:
        client.create_or_update(cid, payload, deadline)
    except AzureError as e:
        raise RemoteError(f"updating {cid}: {e}") from e

    read(d, meta)


def read(d: ResourceData, meta: Clients) -> None:
    deadline = d.timeouts.for_read()

    cid = JobCredentialId.parse(d.id)
    client = meta.job_credentials(cid.subscription_id)

    try:
        credential = client.get(cid, deadline)
    except ResourceNotFoundError:
        log.info(f"{cid} was not found - removing from state")
        d.set_id("")
        return
    except AzureError as e:
        raise RemoteError(f"reading {cid}: {e}") from e

    d.set("name", cid.credential_name)
    d.set("job_agent_id", cid.job_agent_id.id())

    if credential is not None and (props := credential.properties) is not None:
        d.set("username", props.username)

    # not known remotely: an imported credential starts with version 0
    d.set("password_wo_version", d.get("password_wo_version") or 0)


def delete(d: ResourceData, meta: Clients) -> None:
    deadline = d.timeouts.for_delete()

    cid = JobCredentialId.parse(d.id)
    client = meta.job_credentials(cid.subscription_id)

    try:
        client.delete(cid, deadline)
    except AzureError as e:
        raise RemoteError(f"deleting {cid}: {e}") from e


def validate_import_id(id: str) -> JobCredentialId:
    return JobCredentialId.parse(id)


schema: Schema = {
    "name": SchemaField(FieldType.string, required=True, force_new=True),
    "job_agent_id": SchemaField(FieldType.string, required=True, force_new=True, validate=validate_job_agent_id),
    "username": SchemaField(FieldType.string, required=True),
    "password": SchemaField(
        FieldType.string,
        optional=True,
        sensitive=True,
        conflicts_with=["password_wo"],
        exactly_one_of=["password", "password_wo"],
    ),
    "password_wo": SchemaField(
        FieldType.string,
        optional=True,
        write_only=True,
        required_with=["password_wo_version"],
        conflicts_with=["password"],
        exactly_one_of=["password_wo", "password"],
    ),
    "password_wo_version": SchemaField(FieldType.integer, optional=True, required_with=["password_wo"], default=0),
}

MsSqlJobCredentialResource = Resource(
    type_name=resource_type,
    schema=schema,
    timeouts=ResourceTimeouts(
        create=timedelta(minutes=60),
        read=timedelta(minutes=5),
        update=timedelta(minutes=60),
        delete=timedelta(minutes=60),
    ),
    create=create,
    read=read,
    update=update,
    delete=delete,
    importer=validate_import_id,
)
