"""Display strings for attribute cells."""

import math
import struct
from decimal import Decimal

from .errors import MalformedValue
from .models import Value, ValueKind

INTEGER_KINDS = {
    ValueKind.SINT,
    ValueKind.UINT,
    ValueKind.INT64,
    ValueKind.UINT64,
    ValueKind.SINT64,
}


def _round_f32(x: float) -> float:
    return struct.unpack("<f", struct.pack("<f", x))[0]


def _shortest_f32(x: float) -> str:
    # Fewest significant digits that still read back as the same 32-bit float.
    for digits in range(1, 10):
        text = f"{x:.{digits}g}"
        try:
            if _round_f32(float(text)) == x:
                return text
        except OverflowError:
            continue
    return repr(x)


def format_float(x: float, single: bool = False) -> str:
    """Plain decimal rendering: no exponent, no trailing ``.0``.

    ``single`` selects 32-bit precision, so a float cell holding 0.1 prints as
    ``0.1`` rather than the widened ``0.10000000149011612``.
    """
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    text = _shortest_f32(x) if single else repr(x)
    plain = format(Decimal(text), "f")
    if "." in plain:
        plain = plain.rstrip("0").rstrip(".")
    return plain


def format_value(value: Value) -> str:
    """Render a cell for the summary, trimmed of surrounding whitespace.

    Raises:
        MalformedValue: if no variant of the cell is populated
    """
    kind = value.kind
    if kind is ValueKind.STRING:
        text = value.data
    elif kind is ValueKind.FLOAT:
        text = format_float(value.data, single=True)
    elif kind is ValueKind.DOUBLE:
        text = format_float(value.data)
    elif kind in INTEGER_KINDS:
        text = str(int(value.data))
    elif kind is ValueKind.BOOL:
        text = "true" if value.data else "false"
    elif kind is None:
        raise MalformedValue("Value has no populated variant")
    else:
        raise MalformedValue(f"Unhandled value kind: {kind!r}")
    return text.strip()
