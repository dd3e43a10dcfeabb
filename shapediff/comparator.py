"""Structural (shape) comparison of two JSON payloads."""

from __future__ import annotations

from typing import Any, Optional

from .models import ComparisonPath, JsonKind, MismatchRecord, MismatchType


def compare_shape(
    client: Any,
    reference: Any,
    endpoint: str = "",
    path: Optional[ComparisonPath] = None
) -> Optional[MismatchRecord]:
    """
    Compare two decoded JSON values by shape only.

    Two values match when they carry the same JSON kind; objects must also
    have the same key set and arrays the same length, with matching children.
    Scalar values themselves are never compared.

    Args:
        client: Value returned by the candidate backend
        reference: Value returned by the reference backend
        endpoint: Endpoint identifier used in the diagnostic
        path: Position of the two values inside the full responses

    Returns:
        None when the shapes match, otherwise the first MismatchRecord found
    """
    if path is None:
        path = ComparisonPath()

    client_kind = JsonKind.of(client)
    reference_kind = JsonKind.of(reference)

    if client_kind != reference_kind:
        return MismatchRecord(endpoint, path, client, reference, MismatchType.TYPE_MISMATCH)

    if client_kind == JsonKind.OBJECT:
        return _compare_objects(client, reference, endpoint, path)
    if client_kind == JsonKind.ARRAY:
        return _compare_arrays(client, reference, endpoint, path)

    # Same scalar kind
    return None


def _compare_objects(
    client: dict,
    reference: dict,
    endpoint: str,
    path: ComparisonPath
) -> Optional[MismatchRecord]:
    # Sorted so diagnostics do not depend on server key order
    for key in sorted(client):
        child_path = path.child(key)
        if key not in reference:
            return MismatchRecord(
                endpoint, child_path, client[key], None, MismatchType.MISSING_IN_REFERENCE
            )
        mismatch = compare_shape(client[key], reference[key], endpoint, child_path)
        if mismatch is not None:
            return mismatch

    for key in sorted(reference):
        if key not in client:
            return MismatchRecord(
                endpoint, path.child(key), None, reference[key], MismatchType.MISSING_IN_CLIENT
            )

    return None


def _compare_arrays(
    client: list,
    reference: list,
    endpoint: str,
    path: ComparisonPath
) -> Optional[MismatchRecord]:
    if len(client) != len(reference):
        return MismatchRecord(
            endpoint, path, client, reference, MismatchType.ARRAY_LENGTH_MISMATCH
        )

    for index, (client_item, reference_item) in enumerate(zip(client, reference)):
        mismatch = compare_shape(client_item, reference_item, endpoint, path.child(index))
        if mismatch is not None:
            return mismatch

    return None


def shapes_match(client: Any, reference: Any) -> bool:
    """Return True when two JSON values have the same shape."""
    return compare_shape(client, reference) is None
