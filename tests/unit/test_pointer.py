"""Unit tests for relative motion reconstruction"""

from xin.common.types import MotionCommand, Position, ScreenGeometry
from xin.x11.pointer import PointerState


class TestPointerBaseline:
    """Lazy baseline from the session"""

    def test_invalid_until_first_motion(self, fake_session):
        pointer = PointerState(fake_session)
        assert pointer.valid is False
        assert pointer.position_get() is None
        assert fake_session.calls == []

    def test_baseline_queried_once(self, fake_session):
        """Only the first motion reads the pointer from the server"""
        pointer = PointerState(fake_session)
        pointer.motion_apply(MotionCommand(delta_x=1, delta_y=1))
        fake_session.pointer = Position(x=400, y=400)
        pointer.motion_apply(MotionCommand(delta_x=1, delta_y=1))

        assert len(fake_session.calls_named("pointerPosition_get")) == 1
        assert pointer.position_get() == Position(x=98, y=98)

    def test_screen_bounds_queried_every_motion(self, fake_session):
        """Bounds are never cached"""
        pointer = PointerState(fake_session)
        for _ in range(3):
            pointer.motion_apply(MotionCommand(delta_x=0, delta_y=0))
        assert len(fake_session.calls_named("screenGeometry_get")) == 3


class TestMotionMath:
    """Subtraction and per-axis clamping"""

    def test_positive_delta_moves_toward_origin(self, fake_session):
        pointer = PointerState(fake_session)
        assert pointer.motion_apply(MotionCommand(delta_x=5, delta_y=5)) == Position(x=95, y=95)

    def test_negative_delta_moves_away_from_origin(self, fake_session):
        pointer = PointerState(fake_session)
        assert pointer.motion_apply(MotionCommand(delta_x=-10, delta_y=-20)) == Position(
            x=110, y=120
        )

    def test_clamp_low(self, fake_session):
        """Driving below zero yields exactly zero"""
        pointer = PointerState(fake_session)
        assert pointer.motion_apply(MotionCommand(delta_x=500, delta_y=50)) == Position(x=0, y=50)

    def test_clamp_high(self, fake_session):
        """Driving past the screen yields exactly the dimension"""
        pointer = PointerState(fake_session)
        assert pointer.motion_apply(MotionCommand(delta_x=-5000, delta_y=-5000)) == Position(
            x=800, y=600
        )

    def test_clamped_position_is_next_baseline(self, fake_session):
        """Clamping is not undone by a reverse delta"""
        pointer = PointerState(fake_session)
        pointer.motion_apply(MotionCommand(delta_x=500, delta_y=0))
        assert pointer.motion_apply(MotionCommand(delta_x=-10, delta_y=0)) == Position(
            x=10, y=100
        )

    def test_bounds_change_between_motions(self, fake_session):
        """A shrinking screen clamps the next result"""
        pointer = PointerState(fake_session)
        pointer.motion_apply(MotionCommand(delta_x=-300, delta_y=-300))
        fake_session.geometry = ScreenGeometry(width=200, height=200)
        assert pointer.motion_apply(MotionCommand(delta_x=0, delta_y=0)) == Position(
            x=200, y=200
        )


class TestScreenGeometryClamp:
    """ScreenGeometry.clamp"""

    def test_inside(self):
        assert ScreenGeometry(width=10, height=10).clamp(3, 4) == Position(x=3, y=4)

    def test_edges_inclusive(self):
        assert ScreenGeometry(width=10, height=10).clamp(10, 10) == Position(x=10, y=10)
