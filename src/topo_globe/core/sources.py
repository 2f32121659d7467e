"""Parsing of topology and tabular join sources from already-read text."""

import json
import logging
import math
import re
from typing import Union

from ..models import JoinRecord, Topology

logger = logging.getLogger(__name__)

# Plain decimal literals only: no digit-group underscores, no non-ASCII digits
_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_topology(data: Union[str, bytes, dict]) -> Topology:
    """Validate a TopoJSON document (text or already-parsed dict) into a Topology.

    Raises pydantic.ValidationError for documents that do not match the model,
    and json.JSONDecodeError for invalid JSON text.
    """
    if isinstance(data, (str, bytes)):
        data = json.loads(data)
    topology = Topology.model_validate(data)
    logger.debug(
        "Parsed topology: %d arcs, objects=%s", len(topology.arcs), list(topology.objects)
    )
    return topology


def coerce_cell(value: str) -> Union[int, float, str]:
    """Return the cell as a number if the whole cell parses as one, else as text."""
    text = value.strip()
    if _INT_RE.fullmatch(text):
        return int(text)
    if not _FLOAT_RE.fullmatch(text):
        return value
    number = float(text)
    if not math.isfinite(number):
        return value
    return number


def parse_table(text: str, delimiter: str = "\t") -> list[JoinRecord]:
    """Parse delimited text with a header row into JoinRecords.

    Each cell that fully parses as a finite number becomes numeric.
    Rows shorter than the header leave the trailing columns unset.
    """
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if not lines:
        return []
    columns = [c.strip() for c in lines[0].split(delimiter)]
    records = []
    for line in lines[1:]:
        values = [coerce_cell(v) for v in line.split(delimiter)]
        records.append(JoinRecord.model_validate(dict(zip(columns, values))))
    logger.debug("Parsed %d table rows with columns %s", len(records), columns)
    return records
