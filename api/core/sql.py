"""
Compile a `QuerySpec` into asyncpg SQL fragments.

Only identifiers that appear in the resource's allow-lists are emitted, and
they are quoted. Every client value travels as a positional argument.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .pagination import PageWindow
from .query import QuerySpec, rules_for


@dataclass(frozen=True)
class CompiledQuery:
    where: str
    order_by: str
    args: tuple[Any, ...]

    def page_args(self, window: PageWindow) -> tuple[Any, ...]:
        return (*self.args, window.page_size, window.offset)

    def limit_offset(self) -> str:
        n = len(self.args)
        return f"LIMIT ${n + 1} OFFSET ${n + 2}"


def quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _allowed_columns(spec: QuerySpec) -> set[str]:
    rules = rules_for(spec.resource)
    columns = set(rules.search_fields) | set(rules.equality_fields) | set(rules.sort_fields)
    columns.update(rule.column for rule in rules.range_params.values())
    return columns


def compile_spec(spec: QuerySpec, *, base_conditions: tuple[str, ...] = ("deleted_at IS NULL",)) -> CompiledQuery:
    """
    Build the WHERE and ORDER BY clauses for `spec`.

    `base_conditions` are fixed server-side predicates (no placeholders).
    The search clause is OR'd internally and AND'd with everything else.
    """
    allowed = _allowed_columns(spec)
    conditions: list[str] = list(base_conditions)
    args: list[Any] = []

    def column(name: str) -> str:
        if name not in allowed:
            raise ValueError(f"Column '{name}' is not allowed for {spec.resource}.")
        return quote_ident(name)

    if spec.search:
        args.append(f"%{escape_like(spec.search)}%")
        n = len(args)
        ors = [f"{column(name)} ILIKE ${n}" for name in spec.search_fields]
        if ors:
            conditions.append("(" + " OR ".join(ors) + ")")

    for cond in spec.equals:
        args.append(cond.value)
        conditions.append(f"{column(cond.field)} = ${len(args)}")

    for cond in spec.ranges:
        if cond.operator not in (">=", "<="):
            raise ValueError(f"Unsupported range operator '{cond.operator}'.")
        args.append(cond.value)
        conditions.append(f"{column(cond.field)} {cond.operator} ${len(args)}")

    where = " AND ".join(conditions) if conditions else "TRUE"
    direction = "DESC" if spec.sort_order == "desc" else "ASC"
    # id keeps page boundaries stable when sort values tie.
    order_by = f"{column(spec.sort_field)} {direction}, id {direction}"

    return CompiledQuery(where=where, order_by=order_by, args=tuple(args))


def update_assignments(values: dict[str, Any], *, allowed: tuple[str, ...], first_arg: int = 1) -> tuple[str, tuple[Any, ...]]:
    """
    Build "col = $n, ..." for a partial update. Keys outside `allowed` raise.
    """
    parts: list[str] = []
    args: list[Any] = []
    for name, value in values.items():
        if name not in allowed:
            raise ValueError(f"Column '{name}' cannot be updated.")
        args.append(value)
        parts.append(f"{quote_ident(name)} = ${first_arg + len(args) - 1}")
    return ", ".join(parts), tuple(args)
