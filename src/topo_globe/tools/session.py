"""Session persistence tools: save_session, load_session."""

import json
import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..state import state, GlobeParams, LayerToggles, LAYER_NAMES
from .data import read_join_table, read_topology_file

logger = logging.getLogger(__name__)


def _default_path() -> Path:
    return Path.home() / ".cache" / "topo-globe" / "session.json"


def register_session_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def save_session(path: str | None = None) -> str:
        """Save the current session to a JSON file for later resumption.

        Saves globe params, layer toggles, and the file paths of loaded
        topologies and join tables. Does NOT save meshes (rebuild after loading).
        **Next:** load_session in a future session to restore this configuration.

        Args:
            path: Where to save. Default: ~/.cache/topo-globe/session.json
        """
        save_path = Path(path) if path else _default_path()
        save_path.parent.mkdir(parents=True, exist_ok=True)

        data: dict = {
            "params": state.params.model_dump(),
            "layers": state.layers.model_dump(),
            "sources": {
                name: {
                    "topology_path": src.topology_path,
                    "object_name": src.object_name,
                    "table_path": src.table_path,
                }
                for name, src in state.sources.items()
            },
        }

        with open(save_path, "w") as f:
            json.dump(data, f, indent=2)

        logger.info("Session saved to %s", save_path)
        return f"Session saved to {save_path}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_session(path: str | None = None) -> str:
        """Load a previously saved session from a JSON file.

        Restores globe params and layer toggles, and reloads each saved
        topology and join table from disk. Clears built meshes.
        **Next:** build_globe.

        Args:
            path: Path to load from. Default: ~/.cache/topo-globe/session.json
        """
        load_path = Path(path) if path else _default_path()

        if not load_path.exists():
            return f"Error: Session file not found at {load_path}"

        try:
            with open(load_path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            return f"Error: Invalid session file: {e}"

        try:
            if data.get("params"):
                state.params = GlobeParams(**data["params"])
            if data.get("layers"):
                state.layers = LayerToggles(**data["layers"])
        except ValidationError as e:
            return f"Error: Invalid session values: {e}"

        restored = ["params", "layers"]
        problems = []
        for name, saved in (data.get("sources") or {}).items():
            if name not in LAYER_NAMES:
                continue
            if saved.get("object_name"):
                state.sources[name].object_name = saved["object_name"]
            try:
                if saved.get("topology_path"):
                    read_topology_file(name, saved["topology_path"])
                    restored.append(f"{name} topology")
                if saved.get("table_path"):
                    read_join_table(name, saved["table_path"])
                    restored.append(f"{name} join table")
            except ValueError as e:
                logger.warning("Could not restore %s source: %s", name, e)
                problems.append(f"{name}: {e}")

        state.clear_meshes()

        message = (
            f"Session restored from {load_path}. "
            f"Restored: {', '.join(restored)}. "
            "Still needed: build_globe."
        )
        if problems:
            message += f" Not restored: {'; '.join(problems)}"
        return message
