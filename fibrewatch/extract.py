from typing import List, Tuple

from .errors import AddressColumnMissing, FeatureNotFound, NoQueryResult
from .formatting import format_value
from .models import Feature, FeatureCollection, Field

# Column name as published by the service (sic).
ADDRESS_FIELD = "CodeAdress"


def address_column(fields: List[Field]) -> int:
    for i, f in enumerate(fields):
        if f.name == ADDRESS_FIELD:
            return i
    raise AddressColumnMissing(f"No '{ADDRESS_FIELD}' field in feature result")


def find_feature(features: List[Feature], index: int, address: str, truncated: bool = False) -> Feature:
    """First feature whose address cell is the string ``address``.

    ``truncated`` marks a result cut short by the service's transfer limit,
    which the error message then mentions.
    """
    for feature in features:
        if index < len(feature.attributes) and feature.attributes[index].string_value == address:
            return feature
    note = " (result truncated by the service's transfer limit)" if truncated else ""
    raise FeatureNotFound(f"No feature found for address {address!r}{note}")


def extract_fields(collection: FeatureCollection, target_address: str) -> List[Tuple[Field, str]]:
    """
    Field/value table of the feature matching ``target_address``.

    Cells are formatted with format_value; empty ones are dropped and the
    remaining pairs keep the declaration order of the fields.

    Raises:
        NoQueryResult: collection carries no query result
        AddressColumnMissing: no CodeAdress column
        FeatureNotFound: no row has that address
        MalformedValue: a cell of the matched row is unset
    """
    if collection.query_result is None:
        raise NoQueryResult("No query result in feature collection")
    result = collection.query_result.feature_result

    index = address_column(result.fields)
    feature = find_feature(result.features, index, target_address, truncated=result.exceeded_transfer_limit)

    pairs = [(f, format_value(v)) for v, f in zip(feature.attributes, result.fields)]
    return [(f, text) for f, text in pairs if text]
