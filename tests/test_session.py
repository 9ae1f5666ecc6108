"""Tests for the host-facing session API."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest
import liquid_resize.session as session_api
from liquid_resize.carving import carve_image
from liquid_resize.errors import EngineUnavailable
from liquid_resize.session import Session

from conftest import make_random_grid


class TestSession:
    def test_nothing_loaded(self):
        session = Session()
        with pytest.raises(EngineUnavailable):
            session.progress()
        with pytest.raises(EngineUnavailable):
            session.preview_at_seam_count(1)

    def test_load_preview_commit(self):
        grid = make_random_grid(10, 25)
        with Session(min_width=15) as session:
            engine = session.load(grid)
            engine.join(timeout=30)
            assert session.progress() == 10
            carved, _ = carve_image(grid, 4)
            assert session.preview_at_seam_count(4) == carved
            assert session.commit_at_seam_count(4) == carved
            assert session.preview_at_seam_count(99).width == 15

    def test_load_replaces_previous_engine(self):
        session = Session()
        first = session.load(make_random_grid(40, 200, seed=1))
        second = session.load(make_random_grid(8, 20, seed=2))

        # The old worker was cancelled and joined before the new one started
        assert not first.is_running
        assert first.is_finished
        assert session.engine is second
        session.close()

    def test_close_stops_worker(self):
        session = Session()
        engine = session.load(make_random_grid(40, 200, seed=3))
        session.close()
        assert not engine.is_running
        with pytest.raises(EngineUnavailable):
            session.progress()


class TestModuleFunctions:
    def test_default_session_round_trip(self):
        grid = make_random_grid(6, 18)
        engine = session_api.load(grid)
        engine.join(timeout=30)
        n = session_api.progress(engine)
        assert n == 8
        preview = session_api.preview_at_seam_count(engine, 3)
        assert preview.width == 15
        assert session_api.commit_at_seam_count(engine, 3) == preview
        session_api._default_session.close()
