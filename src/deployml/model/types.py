# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Typed attribute descriptors for the DeployML model."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from deployml.errors import TypeMismatchError

T = TypeVar("T")

# ###############
# Public Interface
# ###############

# Property type names used in ``component_types`` definitions.
PROPERTY_TYPES: dict[str, type] = {
    "string": str,
    "integer": int,
    "float": float,
    "boolean": bool,
}


@dataclass(frozen=True)
class Attribute(Generic[T]):
    """A named attribute with the Python type its value is expected to have.

    Attributes:
        name: Key of the attribute in the deployment document.
        type: Expected value type; text values are coerced in pydantic's lax mode.
    """

    name: str
    type: type[T]

    def coerce(self, value: str | None, owner: str = "") -> T | None:
        """Coerce a raw text value to :attr:`type`.

        ``None`` stays ``None``.

        Raises:
            TypeMismatchError: If the value cannot be coerced.
        """
        if value is None:
            return None
        try:
            return _adapter(self.type).validate_python(value)
        except ValidationError as exc:
            where = f" of '{owner}'" if owner else ""
            raise TypeMismatchError(
                f"Value {value!r} of attribute '{self.name}'{where} is not a valid {self.type.__name__}",
                entity=owner or None,
            ) from exc


# ################
# Implementation
# ################


@lru_cache(maxsize=None)
def _adapter(target: type) -> TypeAdapter[Any]:
    return TypeAdapter(target)
