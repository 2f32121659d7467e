"""Globe configuration tools: set_globe_params, set_layers."""

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from ..state import GlobeParams, state


def register_config_tools(mcp: FastMCP):

    @mcp.tool()
    def set_globe_params(
        radius: float | None = None,
        exclude_ids: list[int | str] | None = None,
        join_key: str | None = None,
        grid_lat_step: float | None = None,
        grid_lng_step: float | None = None,
    ) -> str:
        """Set globe geometry and feature filtering parameters.

        Can be called any time before build_globe.
        **Next:** build_globe (re-run after changing params to update meshes).

        Args:
            radius: Sphere radius in scene units (default 0.5). 0 collapses
                every point to the origin.
            exclude_ids: Feature ids to drop before joining (default [-99],
                the world atlas id for shapes with no country).
            join_key: Column used to join tables onto features (default 'id').
            grid_lat_step/grid_lng_step: Grid spacing in degrees (default 10).
        """
        updates = {
            name: value for name, value in [
                ("radius", radius), ("exclude_ids", exclude_ids), ("join_key", join_key),
                ("grid_lat_step", grid_lat_step), ("grid_lng_step", grid_lng_step),
            ]
            if value is not None
        }
        # All-or-nothing: a rejected value leaves the current params untouched
        try:
            p = GlobeParams.model_validate({**state.params.model_dump(), **updates})
        except ValidationError as e:
            return f"Error: {e}"

        state.params = p
        state.clear_meshes()

        return (
            f"Globe params: radius={p.radius}, exclude_ids={p.exclude_ids}, "
            f"join_key={p.join_key!r}, grid={p.grid_lat_step}x{p.grid_lng_step} deg"
        )

    @mcp.tool()
    def set_layers(
        states: bool | None = None,
        cities: bool | None = None,
        grid: bool | None = None,
    ) -> str:
        """Enable or disable the optional globe layers.

        Country borders are always drawn once loaded. Each toggle is
        independent of the others.
        **Next:** build_globe.

        Args:
            states: Draw administrative-region borders.
            cities: Draw city points.
            grid: Draw the latitude/longitude grid overlay.
        """
        t = state.layers
        if states is not None:
            t.states = states
        if cities is not None:
            t.cities = cities
        if grid is not None:
            t.grid = grid

        state.clear_meshes()

        return f"Layers: {t.model_dump()}"
