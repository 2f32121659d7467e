"""Generation tool: build_globe."""

from mcp.server.fastmcp import FastMCP, Context

from ..state import state
from ..core.layers import build_globe as run_build_globe
from ._prereqs import require_state


def register_generate_tools(mcp: FastMCP):

    @mcp.tool()
    async def build_globe(ctx: Context) -> str:
        """Build line and point meshes for every loaded, enabled layer.

        **Requires:** load_topology for at least one layer.
        **Next:** export_meshes, or get_status to inspect vertex counts.

        Layers are built concurrently. A layer whose topology is malformed
        is reported and left out; the other layers still build.
        Re-run this after loading data or changing params.
        """
        try:
            require_state(state, topology=True)
        except ValueError as e:
            return f"Error: {e}"

        async def report(done: int, total: int) -> None:
            await ctx.report_progress(done, total)

        p = state.params
        result = await run_build_globe(
            state.layer_specs(),
            radius=p.radius,
            include_grid=state.layers.grid,
            grid_lat_step=p.grid_lat_step,
            grid_lng_step=p.grid_lng_step,
            progress=report,
        )
        state.globe = result

        built = ", ".join(
            f"{name} ({layer.mesh.vertex_count} {layer.mesh.primitive} vertices)"
            for name, layer in result.layers.items()
        ) or "none"
        message = f"Globe built: {built}."
        if result.errors:
            failed = "; ".join(f"{name}: {err}" for name, err in result.errors.items())
            message += f" Skipped layers: {failed}"
        return message
