"""
Client flag marshalling.

Query parameters whose names appear in the flag table are copied into the
client flags JSON under their short key, converted to the declared type. The
table is built once at start-up from configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from src.rules.models import ClientFlagRule

logger = logging.getLogger(__name__)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() == "true"


FLAG_PARSERS: dict[str, Callable[[str], Any]] = {
    "string": str,
    "int": int,
    "bool": _parse_bool,
    "float": float,
}


@dataclass(frozen=True)
class FlagSpec:
    name: str
    key: str
    type_name: str
    parse: Callable[[str], Any]


class ClientFlagTable:
    def __init__(self, specs: Iterable[FlagSpec]) -> None:
        self._specs = {spec.name: spec for spec in specs}

    @classmethod
    def from_rules(cls, rules: Iterable[ClientFlagRule]) -> ClientFlagTable:
        return cls(
            FlagSpec(name=r.name, key=r.key, type_name=r.type, parse=FLAG_PARSERS[r.type])
            for r in rules
        )

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def to_json(self, params: Mapping[str, str]) -> dict[str, Any]:
        """Convert known flags in ``params``; unknown or unparsable ones are skipped."""
        result: dict[str, Any] = {}
        for name, raw in params.items():
            spec = self._specs.get(name)
            if spec is None:
                continue
            try:
                result[spec.key] = spec.parse(raw)
            except ValueError:
                logger.debug("Ignoring flag %s with unparsable %s value %r", name, spec.type_name, raw)
        return result
