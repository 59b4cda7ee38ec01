"""Environment validator for the service dependency graph.

Pure-function module that inspects a full snapshot of an environment
(services + relationships) for data-integrity problems: duplicate ids,
missing required fields, orphaned relationships, unknown relationship types,
isolated services and circular ``depends_on`` chains. Every check is
self-contained and operates only on the data passed in.

Issues are data, not errors: :func:`validate_graph` never raises.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

import networkx as nx

from src.shared.models.service_graph import (
    IssueSeverity,
    IssueType,
    Relationship,
    RelationshipType,
    Service,
    ValidationIssue,
    ValidationResult,
)

_CANONICAL_RELATIONSHIP_TYPES: frozenset[str] = frozenset(
    member.value for member in RelationshipType
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_graph(
    services: Sequence[Service],
    relationships: Sequence[Relationship],
) -> ValidationResult:
    """Validate an environment snapshot.

    Checks performed, in report order:
        1. Duplicate service ids (error)
        2. Missing required fields on services (error)
        3. Orphaned relationships, one issue per missing endpoint (error)
        4. Non-canonical relationship types (warning)
        5. Services with no relationships at all (info)
        6. Circular ``depends_on`` dependencies (warning)

    Args:
        services: Every service loaded for the environment, duplicates included.
        relationships: Every relationship of the environment.

    Returns:
        ValidationResult listing issues in check order, then discovery order.
    """
    issues: list[ValidationIssue] = []

    issues.extend(_check_duplicate_service_ids(services))
    issues.extend(_check_required_fields(services))
    issues.extend(_check_orphaned_relationships(services, relationships))
    issues.extend(_check_relationship_types(relationships))
    issues.extend(_check_unreachable_services(services, relationships))
    issues.extend(_check_circular_dependencies(services, relationships))

    return ValidationResult(issues=issues)


def detect_circular_dependencies(
    service_ids: Sequence[str],
    relationships: Sequence[Relationship],
) -> list[list[str]]:
    """Find unique ``depends_on`` cycles.

    A depth-first search is started from every id in *service_ids*; a cycle
    is recorded whenever the search gets back to its start after at least
    one other node, so self-loops never count. Cycles found from different
    starting points are collapsed by their canonical rotation and the first
    one discovered is kept.

    Returns:
        Closed paths such as ``["a", "b", "c", "a"]``.
    """
    graph = _build_dependency_graph(service_ids, relationships)

    unique_cycles: list[list[str]] = []
    seen: set[tuple[str, ...]] = set()
    for start in service_ids:
        for cycle in _find_cycles_from(graph, start):
            canonical = normalize_cycle(cycle)
            if canonical not in seen:
                seen.add(canonical)
                unique_cycles.append(cycle)

    return unique_cycles


def normalize_cycle(cycle: Sequence[str]) -> tuple[str, ...]:
    """Drop the closing node and rotate the smallest id to the front.

    ``["b", "c", "a", "b"]`` becomes ``("a", "b", "c")``.
    """
    if not cycle:
        return ()
    nodes = list(cycle[:-1])
    if not nodes:
        return ()
    pivot = nodes.index(min(nodes))
    return tuple(nodes[pivot:] + nodes[:pivot])


# ---------------------------------------------------------------------------
# Individual validation checks (private helpers)
# ---------------------------------------------------------------------------


def _check_duplicate_service_ids(services: Sequence[Service]) -> list[ValidationIssue]:
    """One issue per id that occurs more than once."""
    issues: list[ValidationIssue] = []

    counts = Counter(service.id for service in services)
    for service_id, count in counts.items():
        if count > 1:
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.ERROR,
                    issue_type=IssueType.DUPLICATE_SERVICE_ID,
                    message=f"Duplicate service ID '{service_id}' found {count} times",
                    affected_ids=[service_id],
                    suggestion="Rename one of the duplicate services",
                )
            )

    return issues


def _check_required_fields(services: Sequence[Service]) -> list[ValidationIssue]:
    """Flag services whose id or name is blank."""
    issues: list[ValidationIssue] = []

    for service in services:
        missing: list[str] = []
        if not service.id.strip():
            missing.append("id")
        if not service.name.strip():
            missing.append("name")
        if not missing:
            continue

        fields = ", ".join(missing)
        issues.append(
            ValidationIssue(
                severity=IssueSeverity.ERROR,
                issue_type=IssueType.MISSING_REQUIRED_FIELD,
                message=f"Service '{service.id}' is missing required fields: {fields}",
                affected_ids=[service.id],
                suggestion=f"Add missing fields: {fields}",
            )
        )

    return issues


def _check_orphaned_relationships(
    services: Sequence[Service],
    relationships: Sequence[Relationship],
) -> list[ValidationIssue]:
    """Report every relationship endpoint that is not a known service."""
    issues: list[ValidationIssue] = []

    known_ids: set[str] = {service.id for service in services}

    for rel in relationships:
        for role, endpoint in (("source", rel.source), ("target", rel.target)):
            if endpoint in known_ids:
                continue
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.ERROR,
                    issue_type=IssueType.ORPHANED_RELATIONSHIP,
                    message=(
                        f"Relationship '{rel.id}' references non-existent "
                        f"{role} service '{endpoint}'"
                    ),
                    affected_ids=[rel.id, endpoint],
                    suggestion=f"Create service '{endpoint}' or delete this relationship",
                )
            )

    return issues


def _check_relationship_types(
    relationships: Sequence[Relationship],
) -> list[ValidationIssue]:
    """Warn about relationship types outside the canonical set.

    Custom types are accepted by the data model but are still reported here.
    """
    issues: list[ValidationIssue] = []

    allowed = ", ".join(member.value for member in RelationshipType)
    for rel in relationships:
        rel_type = rel.relationship_type
        if rel_type in _CANONICAL_RELATIONSHIP_TYPES:
            continue
        issues.append(
            ValidationIssue(
                severity=IssueSeverity.WARNING,
                issue_type=IssueType.INVALID_RELATIONSHIP_TYPE,
                message=f"Relationship '{rel.id}' has unknown type '{rel_type}'",
                affected_ids=[rel.id],
                suggestion=f"Use a standard relationship type: {allowed}",
            )
        )

    return issues


def _check_unreachable_services(
    services: Sequence[Service],
    relationships: Sequence[Relationship],
) -> list[ValidationIssue]:
    """Note services that appear in no relationship at all."""
    issues: list[ValidationIssue] = []

    connected: set[str] = set()
    for rel in relationships:
        connected.add(rel.source)
        connected.add(rel.target)

    for service in services:
        if service.id in connected:
            continue
        issues.append(
            ValidationIssue(
                severity=IssueSeverity.INFO,
                issue_type=IssueType.UNREACHABLE_SERVICE,
                message=f"Service '{service.id}' has no relationships (isolated)",
                affected_ids=[service.id],
                suggestion="Add relationships or consider if this service is needed",
            )
        )

    return issues


def _check_circular_dependencies(
    services: Sequence[Service],
    relationships: Sequence[Relationship],
) -> list[ValidationIssue]:
    """Turn every unique ``depends_on`` cycle into a warning."""
    service_ids = list(dict.fromkeys(service.id for service in services))

    return [
        ValidationIssue(
            severity=IssueSeverity.WARNING,
            issue_type=IssueType.CIRCULAR_DEPENDENCY,
            message=f"Circular dependency detected: {' -> '.join(cycle)}",
            affected_ids=list(cycle),
            suggestion="Consider breaking the circular dependency",
        )
        for cycle in detect_circular_dependencies(service_ids, relationships)
    ]


# ---------------------------------------------------------------------------
# Cycle search
# ---------------------------------------------------------------------------


def _build_dependency_graph(
    service_ids: Sequence[str],
    relationships: Sequence[Relationship],
) -> nx.DiGraph:
    """Directed graph of ``depends_on`` edges whose source is a known service.

    Successor order follows relationship order.
    """
    known_ids = set(service_ids)

    graph = nx.DiGraph()
    graph.add_nodes_from(service_ids)

    for rel in relationships:
        if rel.relationship_type != RelationshipType.DEPENDS_ON:
            continue
        if rel.source in known_ids:
            graph.add_edge(rel.source, rel.target)

    return graph


def _find_cycles_from(graph: nx.DiGraph, start: str) -> list[list[str]]:
    """Every closed path back to *start*, in depth-first discovery order.

    Uses an explicit stack of successor iterators instead of recursion; the
    visiting order is the same as a recursive search that keeps the current
    path in its visited set.
    """
    cycles: list[list[str]] = []

    path: list[str] = [start]
    on_path: set[str] = {start}
    stack = [iter(graph.successors(start))]

    while stack:
        neighbor = next(stack[-1], None)
        if neighbor is None:
            stack.pop()
            on_path.discard(path.pop())
            continue

        if neighbor in on_path:
            if neighbor == start and len(path) > 1:
                cycles.append(path + [start])
            continue

        path.append(neighbor)
        on_path.add(neighbor)
        stack.append(iter(graph.successors(neighbor)))

    return cycles
