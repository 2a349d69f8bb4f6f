from typing import Any, Optional

from fix_plugin_azure_mssql.schema import Schema, SchemaField
from fix_plugin_azure_mssql.timeouts import ResourceTimeouts
from fixlib.types import Json


class ResourceData:
    """
    The declared state of a single resource instance.

    Holds the prior state (as last persisted) and the desired configuration.
    With a configuration, `get` returns the configured value or the field default for fields left out.
    Without one, `get` returns the prior value. `has_change` compares prior and desired value.
    Write only values are only available via `get_write_only` and never become part of the state.
    """

    def __init__(
        self,
        schema: Schema,
        timeouts: ResourceTimeouts,
        config: Optional[Json] = None,
        state: Optional[Json] = None,
        id: str = "",
    ) -> None:
        self.schema = schema
        self.timeouts = timeouts
        self._config = dict(config or {})
        self._old = {k: v for k, v in (state or {}).items() if k in schema and not schema[k].write_only}
        if config is None:
            # refresh, destroy and import only know the prior state
            self._new = dict(self._old)
        else:
            # a field missing in the configuration is unset, not unchanged
            self._new = {
                k: self._config[k] if self._config.get(k) is not None else f.default
                for k, f in schema.items()
                if not f.write_only
            }
        self._id = id

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, id: str) -> None:
        """Set the durable handle of this resource. The empty string marks the resource as gone."""
        self._id = id

    def _field(self, key: str) -> SchemaField:
        if key not in self.schema:
            raise KeyError(f"Invalid address: {key} is not part of the schema")
        return self.schema[key]

    def get(self, key: str) -> Any:
        if self._field(key).write_only:
            raise KeyError(f"{key} is write only. Use get_write_only to access the value")
        return self._new.get(key)

    def set(self, key: str, value: Any) -> None:
        if self._field(key).write_only:
            raise KeyError(f"{key} is write only and can not be set")
        self._new[key] = value

    def has_change(self, key: str) -> bool:
        self._field(key)
        return self._old.get(key) != self._new.get(key)

    def get_write_only(self, key: str) -> Optional[Any]:
        if not self._field(key).write_only:
            raise KeyError(f"{key} is not a write only attribute")
        return self._config.get(key)

    def state(self) -> Optional[Json]:
        """
        The attributes to persist. None if the resource does not exist (anymore).
        """
        if not self._id:
            return None
        return {k: v for k, v in self._new.items() if not self.schema[k].write_only}
