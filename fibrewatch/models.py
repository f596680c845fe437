"""
In-memory form of a decoded FeatureCollection buffer.

These types are built once per run by ``fibrewatch.pbf.decode_collection``
and consumed by the extractor. They are never mutated after decoding.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class ValueKind(str, Enum):
    """Populated branch of a Value cell, named after its wire field."""

    STRING = "string_value"
    FLOAT = "float_value"
    DOUBLE = "double_value"
    SINT = "sint_value"
    UINT = "uint_value"
    INT64 = "int64_value"
    UINT64 = "uint64_value"
    SINT64 = "sint64_value"
    BOOL = "bool_value"


Scalar = Union[str, float, int, bool]


@dataclass(frozen=True)
class Field:
    """Column descriptor shared by every feature of a result."""

    name: str
    alias: str = ""


@dataclass(frozen=True)
class Value:
    """One attribute cell. ``kind`` is None when no variant was set."""

    kind: Optional[ValueKind] = None
    data: Optional[Scalar] = None

    @property
    def string_value(self) -> str:
        # Same contract as the generated accessor: other variants read as "".
        if self.kind is ValueKind.STRING:
            return self.data
        return ""

    @classmethod
    def of_string(cls, s: str) -> "Value":
        return cls(ValueKind.STRING, s)


@dataclass(frozen=True)
class Feature:
    attributes: List[Value] = field(default_factory=list)


@dataclass(frozen=True)
class FeatureResult:
    fields: List[Field] = field(default_factory=list)
    features: List[Feature] = field(default_factory=list)
    exceeded_transfer_limit: bool = False


@dataclass(frozen=True)
class QueryResult:
    feature_result: FeatureResult = field(default_factory=FeatureResult)


@dataclass(frozen=True)
class FeatureCollection:
    query_result: Optional[QueryResult] = None
    version: str = ""
