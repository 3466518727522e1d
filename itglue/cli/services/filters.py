from __future__ import annotations

import re
from typing import Any, Callable, Iterable, List, Optional

Predicate = Callable[[dict], bool]


def attribute(record: dict, name: str) -> Any:
    """Read a value from a JSON:API resource's attributes, or its top level"""
    attributes = record.get("attributes") or {}
    for key in (name, name.replace("_", "-"), name.replace("-", "_")):
        if key in attributes:
            return attributes[key]
    return record.get(name)


def filter_records(
    records: Iterable[dict], predicate: Optional[Predicate]
) -> List[dict]:
    if predicate is None:
        return list(records)
    return [r for r in records if predicate(r)]


def _text_matcher(pattern: str, regex: bool) -> Callable[[str], bool]:
    if regex:
        compiled = re.compile(pattern, re.IGNORECASE)
        return lambda value: compiled.search(value) is not None
    folded = pattern.casefold()
    return lambda value: value.casefold() == folded


def name_matches(pattern: str, key: str = "name", regex: bool = False) -> Predicate:
    """Case insensitive match of `key` against `pattern`.

    With `regex` the pattern may match anywhere in the value, otherwise the
    whole value must be equal.
    """
    return _value_matches(lambda r: attribute(r, key), pattern, regex)


def hostname_matches(pattern: str, regex: bool = False) -> Predicate:
    """Match a configuration's hostname, falling back to its name"""

    def hostname(record: dict) -> Any:
        value = attribute(record, "hostname")
        if value in (None, ""):
            value = attribute(record, "name")
        return value

    return _value_matches(hostname, pattern, regex)


def _value_matches(
    get: Callable[[dict], Any], pattern: str, regex: bool
) -> Predicate:
    match = _text_matcher(pattern, regex)

    def predicate(record: dict) -> bool:
        value = get(record)
        return value is not None and match(str(value))

    return predicate


def id_matches(value: Any, key: str = "id") -> Predicate:
    expected = str(value)
    return lambda record: str(attribute(record, key)) == expected


def all_of(*predicates: Optional[Predicate]) -> Optional[Predicate]:
    ps = [p for p in predicates if p is not None]
    if not ps:
        return None
    return lambda record: all(p(record) for p in ps)
