"""Query contract extractor — declared query fields from route file text.

A route file may declare the query string it expects::

    export interface QueryParams {
      q: string;
      page?: number;
      category?: string[]; // one pair per element
    }

This is best-effort textual scanning, not type evaluation.  The block is
read with a single-level brace scanner: a nested ``{`` (inline object
types) or a missing closing brace is reported as an unsupported contract
shape instead of producing partial fields.  Field lines that do not look
like ``name?: type`` are skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from routegen.routes.model import QueryParamSpec

_DECLARATION_RE = re.compile(
    r"export\s+(?:interface\s+QueryParams\b|type\s+QueryParams\s*=)\s*\{"
)
_FIELD_RE = re.compile(r"^([A-Za-z_$][\w$]*)\s*(\?)?\s*:\s*(.+)$")
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)


@dataclass(frozen=True, slots=True)
class ContractScan:
    """Outcome of scanning one file for a query contract.

    Attributes:
        params: Extracted fields in declaration order.
        found: Whether a ``QueryParams`` declaration was present at all.
        problem: Why the block was rejected, or *None*.

    """

    params: tuple[QueryParamSpec, ...] = ()
    found: bool = False
    problem: str | None = None


def scan_query_contract(text: str) -> ContractScan:
    """Scan *text* for a ``QueryParams`` block.  Never raises."""
    match = _DECLARATION_RE.search(text)
    if match is None:
        return ContractScan()

    start = match.end()
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            return ContractScan(
                found=True,
                problem="nested braces in QueryParams are not supported",
            )
        if char == "}":
            body = text[start:index]
            return ContractScan(params=_parse_fields(body), found=True)

    return ContractScan(found=True, problem="unterminated QueryParams block")


def extract_query_params(text: str) -> tuple[QueryParamSpec, ...]:
    """Convenience wrapper returning only the extracted fields."""
    return scan_query_contract(text).params


def _parse_fields(body: str) -> tuple[QueryParamSpec, ...]:
    body = _BLOCK_COMMENT_RE.sub("", body)
    body = _LINE_COMMENT_RE.sub("", body)

    fields: list[QueryParamSpec] = []
    seen: set[str] = set()
    for raw in re.split(r"[;\n]", body):
        line = raw.strip().rstrip(",").strip()
        if not line:
            continue
        match = _FIELD_RE.match(line)
        if match is None:
            continue
        name, optional, type_text = match.groups()
        if name in seen:
            continue
        seen.add(name)
        fields.append(QueryParamSpec(
            name=name,
            type=" ".join(type_text.split()),
            optional=optional is not None,
        ))
    return tuple(fields)
