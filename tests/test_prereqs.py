"""Tests for tool prerequisite helpers."""
import pytest


def test_require_state_raises_when_no_topology_loaded():
    from topo_globe.tools._prereqs import require_state
    from topo_globe.state import SessionState

    mock_state = SessionState()
    with pytest.raises(ValueError, match="load_topology"):
        require_state(mock_state, topology=True)


def test_require_state_passes_when_any_topology_loaded():
    from topo_globe.tools._prereqs import require_state
    from topo_globe.state import SessionState
    from topo_globe.models import Topology

    mock_state = SessionState()
    mock_state.sources["cities"].topology = Topology()
    # Should not raise
    require_state(mock_state, topology=True)


def test_require_state_raises_when_meshes_not_built():
    from topo_globe.tools._prereqs import require_state
    from topo_globe.state import SessionState

    mock_state = SessionState()
    with pytest.raises(ValueError, match="build_globe"):
        require_state(mock_state, meshes=True)


def test_require_state_raises_when_every_layer_failed():
    from topo_globe.tools._prereqs import require_state
    from topo_globe.state import SessionState
    from topo_globe.core.models import GlobeResult

    mock_state = SessionState()
    mock_state.globe = GlobeResult(errors={"countries": "bad arc"})
    with pytest.raises(ValueError, match="build_globe"):
        require_state(mock_state, meshes=True)


def test_require_state_no_flags_is_noop():
    from topo_globe.tools._prereqs import require_state
    from topo_globe.state import SessionState

    require_state(SessionState())
