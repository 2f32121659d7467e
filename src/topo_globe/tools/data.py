"""Data loading tools: load_topology, load_join_table."""

import json
import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..state import state, LAYER_NAMES
from ..core.sources import parse_table, parse_topology

logger = logging.getLogger(__name__)


def _check_layer(layer: str) -> None:
    if layer not in LAYER_NAMES:
        raise ValueError(f"layer must be one of {', '.join(LAYER_NAMES)}, got {layer!r}.")


def read_topology_file(layer: str, path: str, object_name: str | None = None) -> str:
    """Load a TopoJSON file into the session for ``layer``. Raises ValueError."""
    _check_layer(layer)
    source_path = Path(path).expanduser()
    if not source_path.exists():
        raise ValueError(f"Topology file not found at {source_path}")
    try:
        topology = parse_topology(source_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {source_path}: {e}")
    except ValidationError as e:
        raise ValueError(f"Not a valid topology: {e.error_count()} validation error(s): {e}")

    source = state.sources[layer]
    if object_name is not None:
        source.object_name = object_name
    source.topology = topology
    source.topology_path = str(source_path)
    state.clear_meshes()

    if source.object_name not in topology.objects:
        logger.warning(
            "Topology %s has no object %r; build_globe will skip layer %s",
            source_path, source.object_name, layer,
        )
    return (
        f"Topology loaded for {layer}: {len(topology.arcs)} arcs, "
        f"objects: {', '.join(sorted(topology.objects)) or 'none'} "
        f"(using {source.object_name!r})"
    )


def read_join_table(layer: str, path: str, delimiter: str = "\t") -> str:
    """Load a delimited join table into the session for ``layer``. Raises ValueError."""
    _check_layer(layer)
    table_path = Path(path).expanduser()
    if not table_path.exists():
        raise ValueError(f"Join table not found at {table_path}")
    records = parse_table(table_path.read_text(encoding="utf-8"), delimiter=delimiter)

    source = state.sources[layer]
    source.records = records
    source.table_path = str(table_path)
    state.clear_meshes()
    return f"Join table loaded for {layer}: {len(records)} records"


def register_data_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_topology(layer: str, path: str, object_name: str | None = None) -> str:
        """Load a TopoJSON file as the source for one globe layer.

        **Next:** Optionally load_join_table, then build_globe.

        Args:
            layer: 'countries', 'states', or 'cities'.
            path: Path to a TopoJSON file (e.g. world-50m.json).
            object_name: Object inside the topology to draw. Defaults to the
                layer name (e.g. 'countries').
        """
        try:
            return read_topology_file(layer, path, object_name)
        except ValueError as e:
            return f"Error: {e}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_join_table(layer: str, path: str, delimiter: str = "\t") -> str:
        """Load a delimited table (header row + records) to join onto a layer's features.

        Numeric-looking cells are parsed as numbers, so an 'id' column joins
        against numeric feature ids.
        **Next:** build_globe.

        Args:
            layer: 'countries', 'states', or 'cities'.
            path: Path to the table (e.g. world-country-names.tsv).
            delimiter: Column separator (default tab).
        """
        try:
            return read_join_table(layer, path, delimiter)
        except ValueError as e:
            return f"Error: {e}"
