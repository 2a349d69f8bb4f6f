from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Dict, Optional, Type, TypeVar, TYPE_CHECKING

from attr import define

from fix_plugin_azure_mssql.errors import InconsistentStateError
from fix_plugin_azure_mssql.resource_data import ResourceData
from fix_plugin_azure_mssql.schema import Schema, validate_config, force_new_fields
from fix_plugin_azure_mssql.timeouts import ResourceTimeouts
from fixlib.json import from_json
from fixlib.json_bender import Bender, bend
from fixlib.types import Json

if TYPE_CHECKING:
    from fix_plugin_azure_mssql.clients import Clients

log = logging.getLogger("fix.plugins.azure_mssql")

T = TypeVar("T")


def parse_json(json: Optional[Json], clazz: Type[T], mapping: Optional[Dict[str, Bender]] = None) -> Optional[T]:
    """
    Use this method to parse json into a class. If the json can not be parsed, the error is logged and None returned.
    :param json: the json to parse.
    :param clazz: the class to parse into.
    :param mapping: the optional mapping to apply before parsing.
    :return: The parsed object or None.
    """
    if not json:
        return None
    try:
        mapped = bend(mapping, json) if mapping is not None else json
        return from_json(mapped, clazz)
    except Exception as e:
        log.warning(f"Failed to parse json into {clazz.__name__}: {e}")
        return None


def without_none(js: Json) -> Json:
    return {k: v for k, v in js.items() if v is not None}


class ApiModel(ABC):
    """
    Base of all models that are exchanged with the Azure API.
    `mapping` reads the camel case API representation, `to_api` renders it again.
    Unset values are not sent.
    """

    mapping: ClassVar[Dict[str, Bender]] = {}

    @classmethod
    def from_api(cls: Type[T], js: Optional[Json]) -> Optional[T]:
        return parse_json(js, cls, cls.mapping)  # type: ignore

    @abstractmethod
    def to_api(self) -> Json:
        pass


CrudFn = Callable[[ResourceData, "Clients"], None]


@define
class Resource:
    """
    Definition of a resource type: schema, timeouts and the functions implementing its lifecycle.
    The lifecycle methods (apply, refresh, destroy, import_state) decide which function to call.
    """

    type_name: str
    schema: Schema
    timeouts: ResourceTimeouts
    create: CrudFn
    read: CrudFn
    update: CrudFn
    delete: CrudFn
    importer: Callable[[str], Any]

    def data(
        self, meta: Clients, config: Optional[Json] = None, state: Optional[Json] = None, id: str = ""
    ) -> ResourceData:
        timeouts = self.timeouts.with_overrides(meta.config.timeouts)
        return ResourceData(self.schema, timeouts, config=config, state=state, id=id)

    def apply(self, meta: Clients, config: Json, state: Optional[Json] = None, id: str = "") -> ResourceData:
        """
        Bring the remote object in line with the given configuration.
        Creates when there is no prior id, replaces when an immutable field changed, updates otherwise.
        """
        validate_config(self.schema, config)
        if not id:
            return self._create(meta, config)

        d = self.data(meta, config, state, id)
        if replaced := [name for name in force_new_fields(self.schema) if d.has_change(name)]:
            log.info(f"{self.type_name}: {', '.join(replaced)} changed. Replace {id}.")
            self.delete(self.data(meta, state=state, id=id), meta)
            return self._create(meta, config)

        if any(d.has_change(name) for name in self.schema if not self.schema[name].write_only):
            self.update(d, meta)
            self._check_present(d, "update")
        else:
            log.debug(f"{self.type_name}: no changes for {id}.")
        return d

    def refresh(self, meta: Clients, state: Optional[Json], id: str) -> Optional[ResourceData]:
        d = self.data(meta, state=state, id=id)
        self.read(d, meta)
        return d if d.id else None

    def destroy(self, meta: Clients, state: Optional[Json], id: str) -> None:
        self.delete(self.data(meta, state=state, id=id), meta)

    def import_state(self, meta: Clients, id: str) -> ResourceData:
        self.importer(id)
        d = self.data(meta, id=id)
        self.read(d, meta)
        if not d.id:
            raise InconsistentStateError(f"Cannot import non-existent remote object: {id}")
        return d

    def _create(self, meta: Clients, config: Json) -> ResourceData:
        d = self.data(meta, config)
        self.create(d, meta)
        self._check_present(d, "create")
        return d

    def _check_present(self, d: ResourceData, action: str) -> None:
        if not d.id:
            raise InconsistentStateError(
                f"{self.type_name}: the remote object was present during {action}, but is absent afterwards."
            )
