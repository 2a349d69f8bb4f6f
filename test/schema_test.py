import pytest

from conftest import job_agent_id
from fix_plugin_azure_mssql.errors import ValidationError
from fix_plugin_azure_mssql.resource.mssql_job_credential import schema
from fix_plugin_azure_mssql.schema import FieldType, force_new_fields, validate_config


def problems_of(config: dict) -> list:
    with pytest.raises(ValidationError) as ex:
        validate_config(schema, config)
    assert str(ex.value).startswith("Invalid configuration: ")
    return ex.value.problems


def test_valid_configs(credential_config: dict, write_only_config: dict) -> None:
    validate_config(schema, credential_config)
    validate_config(schema, write_only_config)


def test_required_and_unknown() -> None:
    problems = problems_of({"name": "cred0", "job_agent_id": job_agent_id, "password": "p", "foo": "bar"})
    assert 'An argument named "foo" is not expected here.' in problems
    assert 'The argument "username" is required, but no definition was found.' in problems


def test_no_password() -> None:
    problems = problems_of({"name": "cred0", "job_agent_id": job_agent_id, "username": "u"})
    assert '"password": one of `password,password_wo` must be specified' in problems


def test_both_passwords(credential_config: dict) -> None:
    problems = problems_of({**credential_config, "password_wo": "x", "password_wo_version": 1})
    assert '"password": conflicts with password_wo' in problems
    assert '"password_wo": conflicts with password' in problems
    # reported once, not once per field
    only_one = [p for p in problems if "only one of" in p]
    assert only_one == [
        '"password": only one of `password,password_wo` can be specified, but `password,password_wo` were specified.'
    ]


def test_write_only_without_version(write_only_config: dict) -> None:
    del write_only_config["password_wo_version"]
    problems = problems_of(write_only_config)
    assert '"password_wo": all of `password_wo,password_wo_version` must be specified' in problems


def test_version_without_write_only(credential_config: dict) -> None:
    problems = problems_of({**credential_config, "password_wo_version": 3})
    assert '"password_wo_version": all of `password_wo,password_wo_version` must be specified' in problems


def test_type_mismatch(write_only_config: dict) -> None:
    problems = problems_of({**write_only_config, "password_wo_version": "1", "username": 12})
    assert '"password_wo_version": expected type of int, got str' in problems
    assert '"username": expected type of string, got int' in problems


def test_invalid_job_agent_id(credential_config: dict) -> None:
    problems = problems_of({**credential_config, "job_agent_id": "/subscriptions/sub/resourceGroups/group1"})
    assert len(problems) == 1
    assert problems[0].startswith('"job_agent_id": parsing')


def test_field_type() -> None:
    assert FieldType.string.accepts("a")
    assert not FieldType.string.accepts(1)
    assert FieldType.integer.accepts(1)
    assert not FieldType.integer.accepts(True)
    assert not FieldType.integer.accepts("1")


def test_force_new_fields() -> None:
    assert force_new_fields(schema) == ["name", "job_agent_id"]
