"""Export tool: export_meshes."""

import logging
from pathlib import Path

import numpy as np
from mcp.server.fastmcp import FastMCP

from ..state import state
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def _validate_output_path(output_path: str) -> None:
    """Raise ValueError if output_path resolves outside the user's home directory."""
    resolved = Path(output_path).resolve()
    home = Path.home().resolve()
    try:
        resolved.relative_to(home)
    except ValueError:
        raise ValueError(
            f"Output path {output_path!r} is outside the home directory. "
            "Use a path within your home directory."
        )


def _collect_buffers() -> dict[str, np.ndarray]:
    """Flat float32 vertex buffers per layer, plus each layer's primitive."""
    arrays: dict[str, np.ndarray] = {}
    for name, mesh in state.globe.meshes.items():
        if mesh.is_empty:
            logger.debug("Skipping empty mesh for layer %s", name)
            continue
        arrays[f"{name}_vertices"] = mesh.vertex_buffer()
        arrays[f"{name}_primitive"] = np.array(mesh.primitive)
    return arrays


def export_npz(output_path: str) -> str:
    """Write every built layer to an .npz archive. Raises ValueError."""
    require_state(state, meshes=True)
    _validate_output_path(output_path)
    path = Path(output_path)
    if path.suffix != ".npz":
        path = path.with_suffix(".npz")
    path.parent.mkdir(parents=True, exist_ok=True)

    arrays = _collect_buffers()
    if not arrays:
        raise ValueError("No mesh data to export")
    np.savez_compressed(path, **arrays)
    logger.info("Exported %d layer buffers to %s", len(arrays) // 2, path)
    return str(path)


def register_export_tools(mcp: FastMCP):

    @mcp.tool()
    def export_meshes(output_path: str) -> str:
        """Export the built layer meshes as flat float32 vertex buffers (.npz).

        Each layer is stored as '<layer>_vertices' (x0, y0, z0, x1, ...) and
        '<layer>_primitive' ('lines' or 'points').
        **Requires:** build_globe first.

        Args:
            output_path: Destination file within your home directory.
        """
        try:
            path = export_npz(output_path)
        except ValueError as e:
            return f"Error: {e}"
        return f"Meshes exported to {path}"
