"""Shared fixtures: sample atlas files and a clean session state."""
import json

import pytest

WORLD = {
    "type": "Topology",
    "transform": {"scale": [0.01, 0.01], "translate": [-180, -90]},
    "arcs": [
        [[18000, 9000], [1000, 0], [0, 1000], [-1000, 0], [0, -1000]],
        [[20000, 9000], [500, 0], [0, 500]],
    ],
    "objects": {
        "countries": {"type": "GeometryCollection", "geometries": [
            {"type": "Polygon", "arcs": [[0]], "id": 4},
            {"type": "Polygon", "arcs": [[1]], "id": -99},
        ]},
        "land": {"type": "MultiPolygon", "arcs": [[[0]], [[1]]]},
    },
}

STATES = {
    "type": "Topology",
    "arcs": [[[0, 0], [5, 0], [0, 5]]],
    "objects": {"states": {"type": "GeometryCollection", "geometries": [
        {"type": "Polygon", "arcs": [[7]], "id": 1},
    ]}},
}

CITIES = {
    "type": "Topology",
    "arcs": [],
    "objects": {"cities": {"type": "GeometryCollection", "geometries": [
        {"type": "Point", "coordinates": [2.35, 48.86], "id": 1},
        {"type": "Point", "coordinates": [-74.0, 40.7], "id": 2},
    ]}},
}

NAMES = "id\tname\n4\tAfghanistan\n8\tAlbania\n"


@pytest.fixture
def atlas_files(tmp_path):
    """Write sample world/states/cities topologies and a names table."""
    paths = {}
    for name, data in [("world", WORLD), ("states", STATES), ("cities", CITIES)]:
        path = tmp_path / f"{name}.json"
        path.write_text(json.dumps(data))
        paths[name] = str(path)
    names = tmp_path / "names.tsv"
    names.write_text(NAMES)
    paths["names"] = str(names)
    return paths


@pytest.fixture
def fresh_state():
    """Reset the global session state in place (tools hold a reference to it)."""
    from topo_globe.state import state, SessionState
    clean = SessionState()
    state.sources = clean.sources
    state.params = clean.params
    state.layers = clean.layers
    state.globe = None
    return state


@pytest.fixture
def anyio_backend():
    """The server code runs on asyncio; don't parametrize over other installed backends."""
    return "asyncio"
