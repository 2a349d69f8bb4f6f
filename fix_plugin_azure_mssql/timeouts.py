from __future__ import annotations

import time
from datetime import timedelta
from typing import Callable, Optional

from attr import define, field, evolve

from fix_plugin_azure_mssql.config import ResourceTimeoutsConfig
from fix_plugin_azure_mssql.errors import DeadlineExceededError
from fixlib.durations import duration_str


@define
class Deadline:
    """
    Point in time after which an operation must not issue further remote calls.
    The remaining time is handed to every remote call as operation timeout.
    """

    timeout: timedelta
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    started: float = field(init=False)

    def __attrs_post_init__(self) -> None:
        self.started = self.clock()

    def remaining(self) -> float:
        return max(0.0, self.timeout.total_seconds() - (self.clock() - self.started))

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def check(self, action: str) -> None:
        if self.expired:
            raise DeadlineExceededError(f"{action}: timeout while waiting ({duration_str(self.timeout)})")


@define
class ResourceTimeouts:
    create: timedelta
    read: timedelta
    update: timedelta
    delete: timedelta

    def with_overrides(self, overrides: Optional[ResourceTimeoutsConfig]) -> ResourceTimeouts:
        if overrides is None:
            return self
        return evolve(
            self,
            create=overrides.create or self.create,
            read=overrides.read or self.read,
            update=overrides.update or self.update,
            delete=overrides.delete or self.delete,
        )

    def for_create(self, clock: Callable[[], float] = time.monotonic) -> Deadline:
        return Deadline(self.create, clock)

    def for_read(self, clock: Callable[[], float] = time.monotonic) -> Deadline:
        return Deadline(self.read, clock)

    def for_update(self, clock: Callable[[], float] = time.monotonic) -> Deadline:
        return Deadline(self.update, clock)

    def for_delete(self, clock: Callable[[], float] = time.monotonic) -> Deadline:
        return Deadline(self.delete, clock)
