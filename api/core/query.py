"""
Query specification builder.

Turns untrusted query-string parameters into a validated `QuerySpec`.
Field names in a spec only ever come from the resource's `ResourceRules`;
client-provided keys are used for lookup, never copied into a query.

Invalid optional refinements (sort, order, year bounds) fall back to
defaults instead of failing the request. That policy lives here and
nowhere else.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

SEARCH_PARAM = "search"
SORT_PARAM = "sort"
ORDER_PARAM = "order"
SORT_ORDERS = ("asc", "desc")
DEFAULT_SORT_ORDER = "asc"

_INT_RE = re.compile(r"[+-]?\d+")

# Bounds of a Postgres INTEGER column.
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def parse_int(raw: str | None) -> int | None:
    """
    Parse a base-10 integer, returning None for anything else.
    """
    if raw is None:
        return None
    value = str(raw).strip()
    if not _INT_RE.fullmatch(value):
        return None
    return int(value)


@dataclass(frozen=True)
class RangeRule:
    column: str
    operator: str  # ">=" or "<="


@dataclass(frozen=True)
class ResourceRules:
    """
    Allow-lists for one resource type.
    """

    name: str
    search_fields: tuple[str, ...]
    equality_fields: tuple[str, ...]
    range_params: Mapping[str, RangeRule]
    sort_fields: tuple[str, ...]
    default_sort: str

    def __post_init__(self) -> None:
        if self.default_sort not in self.sort_fields:
            raise ValueError(f"default sort '{self.default_sort}' is not a sort field of {self.name}")
        for rule in self.range_params.values():
            if rule.operator not in (">=", "<="):
                raise ValueError(f"unsupported range operator '{rule.operator}'")


@dataclass(frozen=True)
class EqualityCondition:
    field: str
    value: str


@dataclass(frozen=True)
class RangeCondition:
    field: str
    operator: str
    value: int


@dataclass(frozen=True)
class QuerySpec:
    resource: str
    sort_field: str
    sort_order: str = DEFAULT_SORT_ORDER
    search: str | None = None
    search_fields: tuple[str, ...] = ()
    equals: tuple[EqualityCondition, ...] = ()
    ranges: tuple[RangeCondition, ...] = ()


CAMERA_RULES = ResourceRules(
    name="camera",
    search_fields=("name", "manufacturer", "description"),
    equality_fields=("manufacturer", "format"),
    range_params={
        "year_from": RangeRule("year_introduced", ">="),
        "year_to": RangeRule("year_introduced", "<="),
    },
    sort_fields=("name", "year_introduced", "rarity"),
    default_sort="name",
)

EPHEMERA_RULES = ResourceRules(
    name="ephemera",
    search_fields=("title", "description", "type"),
    equality_fields=("type",),
    range_params={
        "year_from": RangeRule("year", ">="),
        "year_to": RangeRule("year", "<="),
    },
    sort_fields=("title", "year", "type"),
    default_sort="title",
)

RESOURCES: Mapping[str, ResourceRules] = {
    CAMERA_RULES.name: CAMERA_RULES,
    EPHEMERA_RULES.name: EPHEMERA_RULES,
}


def rules_for(resource_type: str) -> ResourceRules:
    try:
        return RESOURCES[resource_type]
    except KeyError:
        raise ValueError(f"Unknown resource type '{resource_type}'.") from None


def _search_term(raw_params: Mapping[str, str]) -> str | None:
    term = raw_params.get(SEARCH_PARAM)
    if term is None:
        return None
    term = str(term).strip()
    return term or None


def _sort(rules: ResourceRules, raw_params: Mapping[str, str]) -> tuple[str, str]:
    sort_field = raw_params.get(SORT_PARAM)
    if sort_field not in rules.sort_fields:
        sort_field = rules.default_sort

    # Case-sensitive: "ASC" falls back to the default like any other value.
    sort_order = raw_params.get(ORDER_PARAM)
    if sort_order not in SORT_ORDERS:
        sort_order = DEFAULT_SORT_ORDER

    return sort_field, sort_order


def build(resource_type: str | ResourceRules, raw_params: Mapping[str, str]) -> QuerySpec:
    """
    Build a `QuerySpec` for `resource_type` from raw request parameters.

    Unknown parameter names are ignored. Empty equality values are treated
    as absent. Malformed or out-of-range year bounds are dropped.
    """
    rules = resource_type if isinstance(resource_type, ResourceRules) else rules_for(resource_type)

    search = _search_term(raw_params)

    equals: list[EqualityCondition] = []
    for name in rules.equality_fields:
        value = raw_params.get(name)
        if value is None or value == "":
            continue
        equals.append(EqualityCondition(field=name, value=str(value)))

    ranges: list[RangeCondition] = []
    for param, rule in rules.range_params.items():
        bound = parse_int(raw_params.get(param))
        if bound is None or not INT32_MIN <= bound <= INT32_MAX:
            continue
        ranges.append(RangeCondition(field=rule.column, operator=rule.operator, value=bound))

    sort_field, sort_order = _sort(rules, raw_params)

    return QuerySpec(
        resource=rules.name,
        sort_field=sort_field,
        sort_order=sort_order,
        search=search,
        search_fields=rules.search_fields if search else (),
        equals=tuple(equals),
        ranges=tuple(ranges),
    )
