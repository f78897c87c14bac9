# formsafe/models/base_entity.py
"""
Shared construct-and-validate behaviour for storage entities.

Entities are pydantic models whose fields use the annotated types in
field_types. Every assignment, whether from the constructor, from a storage
row, or from plain attribute assignment later on, runs the field's validator
first; a rejected value never replaces the current one.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError

from formsafe.core.exceptions import FieldValidationError, MalformedInputError

logger = logging.getLogger(__name__)


@contextmanager
def _constructing(entity: type) -> Iterator[None]:
    """Re-raise the first rejected field as 'Unable to construct <entity>'."""
    name = entity.__name__
    try:
        yield
    except FieldValidationError as e:
        logger.debug(f"Rejected {name}.{e.field}: {e.message}")
        raise type(e)(
            f"Unable to construct {name}",
            field=e.field,
            value=e.value,
            entity=name
        ) from e
    except ValidationError as e:
        # Only structural problems get here: missing or unknown fields
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        logger.debug(f"Rejected {name}.{field}: {first['msg']}")
        raise MalformedInputError(
            f"Unable to construct {name}",
            field=field,
            entity=name,
            details={"reason": first["msg"]}
        ) from e


class StorageEntity(BaseModel):
    """
    Base class for the storage-bound entities.

    Construction takes the field values positionally or by name, in
    declaration order, and is all-or-nothing: the first rejected field
    aborts construction with an error of the same kind, chained to the
    field-level error.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    def __init__(self, *args: Any, **kwargs: Any):
        names = self.field_names()
        if len(args) > len(names):
            raise TypeError(
                f"{type(self).__name__}() takes {len(names)} arguments but {len(args)} were given"
            )
        for name, value in zip(names, args):
            if name in kwargs:
                raise TypeError(f"{type(self).__name__}() got multiple values for argument '{name}'")
            kwargs[name] = value

        with _constructing(type(self)):
            super().__init__(**kwargs)

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(cls.model_fields)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]):
        """
        Rehydrate an entity from a storage row.

        Args:
            row: Mapping of column name to raw column value; extra keys are ignored

        Returns:
            A fully validated entity

        Raises:
            MalformedInputError: If a column is missing or malformed
            OutOfRangeError: If a column violates a domain rule
        """
        columns = {name: row[name] for name in cls.field_names() if name in row}
        with _constructing(cls):
            return cls.model_validate(columns)

    def to_row(self) -> Dict[str, Any]:
        """Column mapping for storage; date-times in MySQL format."""
        return self.model_dump()

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__}.{name} cannot be deleted")
