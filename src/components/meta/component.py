"""
Meta component - per-entity key/value metadata.

Invariants:
- I1: (entity_id, key) is unique; set overwrites in place
- I2: Keys are 1..191 characters, values JSON-serializable
- I3: Writes require the owning entity to exist; reads do not
- I4: Listing is ordered by key with an exact, case-sensitive prefix filter
"""

from __future__ import annotations

from src.domain.entities import MetaEntry
from src.domain.errors import CmsError

from ._impl import DEFAULT_MAX_KEY_LENGTH, MetaStore
from .models import (
    GetMetaInput,
    ListMetaInput,
    MetaListOutput,
    MetaOutput,
    MetaValidationError,
    RemoveMetaInput,
    SetMetaInput,
)
from .ports import MetaRepoPort, OwnerLookupPort


def _error(e: CmsError) -> MetaValidationError:
    return MetaValidationError(code=e.code, message=e.message, field=e.field)


def run_get(inp: GetMetaInput, *, repo: MetaRepoPort) -> MetaOutput:
    value = MetaStore(repo).get(inp.entity_id, inp.key)
    if value is None:
        return MetaOutput(entry=None)
    return MetaOutput(entry=MetaEntry(owner_id=inp.entity_id, key=inp.key, value=value))


def run_set(
    inp: SetMetaInput,
    *,
    repo: MetaRepoPort,
    owners: OwnerLookupPort | None = None,
    max_key_length: int = DEFAULT_MAX_KEY_LENGTH,
) -> MetaOutput:
    try:
        entry = MetaStore(repo, owners, max_key_length).set(inp.entity_id, inp.key, inp.value)
    except CmsError as e:
        return MetaOutput(entry=None, errors=[_error(e)], success=False)
    return MetaOutput(entry=entry)


def run_remove(inp: RemoveMetaInput, *, repo: MetaRepoPort) -> MetaOutput:
    MetaStore(repo).remove(inp.entity_id, inp.key)
    return MetaOutput(entry=None)


def run_list(inp: ListMetaInput, *, repo: MetaRepoPort) -> MetaListOutput:
    return MetaListOutput(entries=MetaStore(repo).list(inp.entity_id, inp.key_prefix))
