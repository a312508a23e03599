"""Reports — analytics, audit, validation, performance and Markdown docs.

Each report is a pure function over discovered ``RouteEntry`` values (plus
source texts where it inspects a code base); the CLI does the reading and
writing.
"""

from routegen.reports.analytics import ANALYTICS_FILENAME, compute_analytics
from routegen.reports.audit import AUDIT_FILENAME, compute_audit, route_pattern
from routegen.reports.docs import DOCS_FILENAME, render_docs
from routegen.reports.performance import (
    PERFORMANCE_FILENAME,
    RouteMetrics,
    analyze_routes,
    compute_performance,
)
from routegen.reports.sources import read_source_tree, read_sources
from routegen.reports.validate import VALIDATION_FILENAME, compute_validation

__all__ = [
    "ANALYTICS_FILENAME",
    "AUDIT_FILENAME",
    "DOCS_FILENAME",
    "PERFORMANCE_FILENAME",
    "VALIDATION_FILENAME",
    "RouteMetrics",
    "analyze_routes",
    "compute_analytics",
    "compute_audit",
    "compute_performance",
    "compute_validation",
    "read_source_tree",
    "read_sources",
    "render_docs",
    "route_pattern",
]
