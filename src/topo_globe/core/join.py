"""Attribute joins between extracted features and auxiliary table records."""

import logging
from collections.abc import Iterable, Iterator

from ..models import Feature, JoinRecord

logger = logging.getLogger(__name__)


def _feature_key(feature: Feature, key: str):
    if key == "id":
        return feature.id
    return feature.attributes.get(key)


def index_records(records: Iterable[JoinRecord], key: str = "id") -> dict:
    """Map key value -> record. The first record for a key wins."""
    index: dict = {}
    for record in records:
        value = record.get(key)
        if value is None:
            continue
        index.setdefault(value, record)
    return index


def join_attributes(
    features: Iterable[Feature],
    records: Iterable[JoinRecord],
    key: str = "id",
    columns: tuple[str, ...] = ("name",),
) -> Iterator[Feature]:
    """Yield copies of ``features`` with ``columns`` joined from matching records.

    Matching is exact equality on ``key``. Any value the feature already
    carries for a joined column (e.g. a ``name`` from the topology properties)
    is replaced; a feature without a match, or a record lacking a column,
    leaves that column absent.
    """
    index = index_records(records, key)
    misses = 0
    for feature in features:
        value = _feature_key(feature, key)
        record = index.get(value) if value is not None else None
        base = {k: v for k, v in feature.attributes.items() if k not in columns}
        if record is None:
            misses += 1
            yield feature.model_copy(update={"attributes": base})
            continue
        joined = {c: record.get(c) for c in columns if record.has(c)}
        yield feature.model_copy(update={"attributes": {**base, **joined}})
    if misses:
        logger.debug("Join on %r: %d features had no matching record", key, misses)
