"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Any, List, Sequence, Tuple

from fibrewatch.config import Settings
from fibrewatch.logger import get_logger, reset_logger
from fibrewatch.models import (
    Feature,
    FeatureCollection,
    FeatureResult,
    Field,
    QueryResult,
    Value,
    ValueKind,
)
from fibrewatch.pbf import FeatureCollectionPBuffer, ValuePBuffer

FIELDS = [
    ("CodeAdress", "Adresse"),
    ("Commune", "Commune"),
    ("EtatImmeuble", "Etat de l'immeuble"),
    ("NbLogements", "Nombre de logements"),
    ("Commentaire", "Commentaire"),
]

ROWS = [
    ["12 rue A", "Grenoble", "deploye", 4, ""],
    ["5 rue B", "Voiron", "en cours de deploiement", 12, "  "],
]


@pytest.fixture(autouse=True)
def quiet_logger():
    """Fresh global logger per test, no console or file output."""
    reset_logger()
    get_logger(enable_console=False, enable_file=False)
    yield
    reset_logger()


def _cell(cell: Any) -> Value:
    if isinstance(cell, Value):
        return cell
    if isinstance(cell, str):
        return Value.of_string(cell)
    if isinstance(cell, bool):
        return Value(ValueKind.BOOL, cell)
    if isinstance(cell, int):
        return Value(ValueKind.SINT, cell)
    return Value(ValueKind.DOUBLE, cell)


def build_collection(fields: Sequence[Tuple[str, str]], rows: List[list]) -> FeatureCollection:
    """Model-level collection; plain str/int/float/bool cells are wrapped."""
    result = FeatureResult(
        fields=[Field(name, alias) for name, alias in fields],
        features=[Feature([_cell(c) for c in row]) for row in rows],
    )
    return FeatureCollection(query_result=QueryResult(result))


def build_payload(fields: Sequence[Tuple[str, str]], rows: List[list]) -> bytes:
    """Wire-level payload. Cells are str, int, (ValueKind, data) or None for unset."""
    msg = FeatureCollectionPBuffer()
    msg.version = "1.0"
    result = msg.queryResult.featureResult
    for name, alias in fields:
        result.fields.add(name=name, alias=alias)
    for row in rows:
        feature = result.features.add()
        for cell in row:
            value = ValuePBuffer()
            if isinstance(cell, str):
                value.string_value = cell
            elif isinstance(cell, int):
                value.sint_value = cell
            elif cell is not None:
                kind, data = cell
                setattr(value, kind.value, data)
            feature.attributes.add().CopyFrom(value)
    return msg.SerializeToString()


@pytest.fixture
def make_collection():
    return build_collection


@pytest.fixture
def make_payload():
    return build_payload


@pytest.fixture
def sample_collection() -> FeatureCollection:
    """Two-address collection built from model types."""
    return build_collection(FIELDS, ROWS)


@pytest.fixture
def sample_payload() -> bytes:
    """Serialized FeatureCollectionPBuffer for the same two addresses."""
    return build_payload(FIELDS, ROWS)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        url="https://services.example.test/arcgis/rest/services/Fibre/FeatureServer/0/query?f=pbf",
        address="5 rue B",
        gmail_address="watch@example.com",
        gmail_user="watch@example.com",
        gmail_password="app-password",
        fetch_timeout=5.0,
    )
