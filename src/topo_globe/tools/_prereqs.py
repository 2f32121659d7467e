"""Prerequisite checking helpers for MCP tools."""


def require_state(state, *, topology: bool = False, meshes: bool = False) -> None:
    """Raise ValueError with a descriptive message if required state is not set.

    Usage in a tool:
        try:
            require_state(state, topology=True)
        except ValueError as e:
            return f"Error: {e}"
    """
    if topology and not any(src.is_set for src in state.sources.values()):
        raise ValueError(
            "Load a topology first with load_topology."
        )
    if meshes and not (state.globe and state.globe.layers):
        raise ValueError(
            "Build the globe first with build_globe."
        )
