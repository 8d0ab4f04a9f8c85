"""
Read-join - client-side composition of a document with the documents it
references.

The store has no joins. A listing issues its primary query, then one point
lookup per distinct referenced id. Lookups run concurrently in the
threadpool and each one resolves on its own to ``Found`` or ``Missing``; a
lookup that raises never fails the listing.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Iterable, Optional, TypeVar, Union

from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T
    found = True


@dataclass(frozen=True)
class Missing:
    reason: str = "not_found"
    found = False
    value = None


JoinOutcome = Union[Found, Missing]


async def fetch_references(
    lookup: Callable[[str], Optional[Any]],
    ids: Iterable[str],
) -> Dict[str, JoinOutcome]:
    """
    Resolve every distinct id with ``lookup`` concurrently.

    Args:
        lookup: blocking point lookup returning the document or None
        ids: referenced ids, duplicates and blanks allowed

    Returns:
        id -> Found(document) | Missing(reason)
    """
    distinct = list(dict.fromkeys(ref_id for ref_id in ids if ref_id))
    if not distinct:
        return {}

    results = await asyncio.gather(
        *(run_in_threadpool(lookup, ref_id) for ref_id in distinct),
        return_exceptions=True,
    )

    outcomes: Dict[str, JoinOutcome] = {}
    for ref_id, result in zip(distinct, results):
        if isinstance(result, Exception):
            logger.warning("Lookup of %s failed: %s", ref_id, result)
            outcomes[ref_id] = Missing("error")
        elif result is None:
            outcomes[ref_id] = Missing()
        else:
            outcomes[ref_id] = Found(result)
    return outcomes


def outcome_for(outcomes: Dict[str, JoinOutcome], ref_id: Optional[str]) -> JoinOutcome:
    """Outcome for one reference; an empty reference is simply missing."""
    if not ref_id:
        return Missing()
    return outcomes.get(ref_id, Missing())
