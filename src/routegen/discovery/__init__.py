"""Discovery layer — route files to IR entries.

Walks the route directory, rewrites each file path under the selected
framework convention, and extracts path and query parameters.
"""

from routegen.discovery.conventions import (
    DIALECTS,
    ROUTE_EXTENSIONS,
    Convention,
    canonicalize,
    get_convention,
    rewrite,
)
from routegen.discovery.params import extract_params
from routegen.discovery.query import ContractScan, extract_query_params, scan_query_contract
from routegen.discovery.walker import (
    compile_exclude_pattern,
    list_source_files,
    walk_route_files,
)

__all__ = [
    "DIALECTS",
    "ROUTE_EXTENSIONS",
    "ContractScan",
    "Convention",
    "canonicalize",
    "compile_exclude_pattern",
    "extract_params",
    "extract_query_params",
    "get_convention",
    "list_source_files",
    "rewrite",
    "scan_query_contract",
    "walk_route_files",
]
