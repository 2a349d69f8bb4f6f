from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from attr import define, field

from fix_plugin_azure_mssql.errors import ValidationError
from fixlib.types import Json

ValueValidator = Callable[[Any, str], List[str]]


class FieldType(Enum):
    string = "string"
    integer = "int"

    def accepts(self, value: Any) -> bool:
        if self is FieldType.string:
            return isinstance(value, str)
        # bool is a subclass of int, but not a valid number here
        return isinstance(value, int) and not isinstance(value, bool)


@define
class SchemaField:
    type: FieldType
    required: bool = False
    optional: bool = False
    force_new: bool = False
    sensitive: bool = False
    write_only: bool = False
    conflicts_with: List[str] = field(factory=list)
    exactly_one_of: List[str] = field(factory=list)
    required_with: List[str] = field(factory=list)
    validate: Optional[ValueValidator] = None
    # value of the field, if it is not configured
    default: Any = None


Schema = Dict[str, SchemaField]


def validate_config(schema: Schema, config: Json) -> None:
    """
    Check the given configuration against the schema.
    All problems are collected and reported with a single ValidationError.
    """
    problems: List[str] = []
    checked_groups: Set[Tuple[str, ...]] = set()

    def add(problem: str) -> None:
        if problem not in problems:
            problems.append(problem)

    def is_set(name: str) -> bool:
        return config.get(name) is not None

    for name in config:
        if name not in schema:
            add(f'An argument named "{name}" is not expected here.')

    for name, definition in schema.items():
        value = config.get(name)
        if value is None:
            if definition.required:
                add(f'The argument "{name}" is required, but no definition was found.')
        elif not definition.type.accepts(value):
            add(f'"{name}": expected type of {definition.type.value}, got {type(value).__name__}')
        else:
            if definition.validate is not None:
                for problem in definition.validate(value, name):
                    add(f'"{name}": {problem}')
            for other in definition.conflicts_with:
                if is_set(other):
                    add(f'"{name}": conflicts with {other}')
            if definition.required_with and not all(is_set(other) for other in definition.required_with):
                together = ",".join(sorted({name, *definition.required_with}))
                add(f'"{name}": all of `{together}` must be specified')

        # every group is checked once, from the first field that names it
        candidates = sorted({name, *definition.exactly_one_of})
        if definition.exactly_one_of and tuple(candidates) not in checked_groups:
            checked_groups.add(tuple(candidates))
            specified = [c for c in candidates if is_set(c)]
            if not specified:
                add(f'"{name}": one of `{",".join(candidates)}` must be specified')
            elif len(specified) > 1:
                add(
                    f'"{name}": only one of `{",".join(candidates)}` can be specified, '
                    f'but `{",".join(specified)}` were specified.'
                )

    if problems:
        raise ValidationError("Invalid configuration: " + "; ".join(problems), problems)


def force_new_fields(schema: Schema) -> List[str]:
    return [name for name, definition in schema.items() if definition.force_new]
