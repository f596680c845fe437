from typing import Iterable, List, Tuple

from .models import Field


def summary_line(field: Field, value: str) -> str:
    return f"{field.name}/{field.alias}: {value}"


def build_summary(pairs: Iterable[Tuple[Field, str]]) -> str:
    """One ``name/alias: value`` line per pair, newline-joined, no trailing newline."""
    return "\n".join(summary_line(f, v) for f, v in pairs)


def parse_summary(text: str) -> List[Tuple[str, str, str]]:
    """
    Split a summary back into (name, alias, value) triples.

    The name ends at the first "/" and the alias at the first ": " after it,
    so values may contain either separator. A line without that shape
    continues the previous value, which held an embedded newline.

    Raises:
        ValueError: if the first line does not have the summary shape
    """
    triples: List[Tuple[str, str, str]] = []
    if not text:
        return triples
    for lineno, line in enumerate(text.split("\n"), start=1):
        name, slash, rest = line.partition("/")
        alias, colon, value = rest.partition(": ")
        if not slash or not colon:
            if not triples:
                raise ValueError(f"Line {lineno} is not a summary line: {line!r}")
            prev_name, prev_alias, prev_value = triples[-1]
            triples[-1] = (prev_name, prev_alias, f"{prev_value}\n{line}")
            continue
        triples.append((name, alias, value))
    return triples
