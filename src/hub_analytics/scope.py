from uuid import UUID

from hub_analytics.errors import InvalidScope
from hub_analytics.models import Scope, ScopeKey


def resolve_scope(
    organization_id: "UUID | str | None" = None,
    project_id: "UUID | str | None" = None,
    collection_id: "UUID | str | None" = None,
) -> "Scope":
    """
    picks the single identifier a request is scoped to. Exactly one of
    the three must be given.
    """
    candidates = [
        (value, key)
        for value, key in (
            (organization_id, ScopeKey.ORGANIZATION),
            (project_id, ScopeKey.PROJECT),
            (collection_id, ScopeKey.COLLECTION),
        )
        # empty strings count as absent
        if value is not None and str(value) != ""
    ]

    if len(candidates) != 1:
        raise InvalidScope(
            "exactly one of organization_id, project_id or collection_id "
            f"must be provided, got {len(candidates)}"
        )

    value, key = candidates[0]
    return Scope(id=str(value), dimension_key=key)
