"""Tests for wrap movement, animation and lifetime."""

import pytest

from coregfx.depth import Depth
from coregfx.errors import DeadWrapError
from coregfx.wrap import DrawKind, TextStyle, Wrap


@pytest.fixture
def depth():
    return Depth()


@pytest.fixture
def wrap(depth):
    w = Wrap(DrawKind.IMAGE, TextStyle(), "img", 0, 0, 16, 16)
    depth.add(1, w)
    return w


class TestMove:
    def test_overwrites_args(self, wrap):
        wrap.move(5, 6, 7, 8)
        assert wrap.args == [5, 6, 7, 8]

    def test_partial_move_overwrites_leading_args(self, wrap):
        wrap.move(10, 20)
        assert wrap.args == [10, 20, 16, 16]

    def test_too_many_args(self, wrap):
        with pytest.raises(ValueError):
            wrap.move(1, 2, 3, 4, 5)
        assert wrap.args == [0, 0, 16, 16]

    def test_cancels_animation(self, wrap):
        wrap.move_animated("LINEAR", None, 4, 40, 40, 16, 16)
        wrap.step()
        wrap.move(1, 1)
        assert not wrap.animating
        wrap.step()
        assert wrap.args == [1, 1, 16, 16]


class TestMoveAnimated:
    def test_linear_converges_exactly(self, wrap):
        calls = []
        wrap.move_animated("LINEAR", calls.append, 3, 0.3, 0.7, 16, 16)
        for _ in range(3):
            wrap.step()
        assert wrap.args == [0.3, 0.7, 16, 16]
        assert calls == [wrap]
        assert not wrap.animating

    def test_linear_intermediate_steps(self, wrap):
        wrap.move_animated("LINEAR", None, 4, 100, 0, 16, 16)
        wrap.step()
        assert wrap.args[0] == pytest.approx(25)
        wrap.step()
        assert wrap.args[0] == pytest.approx(50)

    def test_smooth_midpoint(self, wrap):
        wrap.move_animated("SMOOTH", None, 2, 100, 0, 16, 16)
        wrap.step()
        assert wrap.args[0] == pytest.approx(50)
        wrap.step()
        assert wrap.args[0] == 100

    def test_callback_fires_once(self, wrap):
        calls = []
        wrap.move_animated("SMOOTH", calls.append, 2, 8, 8, 16, 16)
        for _ in range(10):
            wrap.step()
        assert len(calls) == 1

    def test_callback_sees_final_state_and_can_chain(self, wrap):
        seen = []

        def done(w):
            seen.append(list(w.args))
            w.move_animated("LINEAR", None, 1, 0, 0, 16, 16)

        wrap.move_animated("LINEAR", done, 2, 10, 10, 16, 16)
        wrap.step()
        wrap.step()
        assert seen == [[10, 10, 16, 16]]
        assert wrap.animating
        wrap.step()
        assert wrap.args == [0, 0, 16, 16]

    def test_new_animation_replaces_running_one(self, wrap):
        first = []
        wrap.move_animated("LINEAR", first.append, 10, 100, 0, 16, 16)
        wrap.step()
        wrap.move_animated("LINEAR", None, 1, 0, 50, 16, 16)
        wrap.step()
        assert wrap.args == [0, 50, 16, 16]
        assert first == []

    @pytest.mark.parametrize("steps", [0, -1, 1.5, True])
    def test_steps_must_be_positive_int(self, wrap, steps):
        with pytest.raises(ValueError):
            wrap.move_animated("LINEAR", None, steps, 1, 1, 1, 1)

    def test_target_arity_must_match(self, wrap):
        with pytest.raises(ValueError):
            wrap.move_animated("LINEAR", None, 2, 1, 1)

    def test_unknown_mode(self, wrap):
        with pytest.raises(ValueError):
            wrap.move_animated("BOUNCY", None, 2, 1, 1, 1, 1)

    def test_step_without_animation_is_noop(self, wrap):
        wrap.step()
        assert wrap.args == [0, 0, 16, 16]


class TestDepthAndKill:
    def test_change_depth_moves_bucket(self, depth, wrap):
        wrap.change_depth(9)
        assert depth.get(1) == []
        assert depth.get(9) == [wrap]
        assert wrap.depth == 9

    def test_change_depth_goes_to_end_of_bucket(self, depth, wrap):
        other = Wrap(DrawKind.IMAGE, TextStyle(), "other", 0, 0)
        depth.add(2, other)
        wrap.change_depth(2)
        assert depth.get(2) == [other, wrap]

    def test_kill_removes(self, depth, wrap):
        wrap.kill()
        assert wrap not in depth
        assert not wrap.alive

    def test_double_kill_is_noop(self, depth, wrap):
        wrap.kill()
        wrap.kill()
        assert len(depth) == 0

    @pytest.mark.parametrize(
        "action",
        [
            lambda w: w.move(1, 1),
            lambda w: w.move_animated("LINEAR", None, 1, 1, 1, 1, 1),
            lambda w: w.change_depth(3),
        ],
    )
    def test_operations_on_killed_wrap_raise(self, depth, wrap, action):
        wrap.kill()
        with pytest.raises(DeadWrapError):
            action(wrap)
        assert len(depth) == 0


class TestTextStyle:
    def test_merged_keeps_existing_keys(self):
        style = TextStyle(font="12px serif").merged({"color": "red"})
        assert style == TextStyle(font="12px serif", color="red")

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="shadow"):
            TextStyle().merged({"shadow": 2})

    def test_items_skip_unset(self):
        assert dict(TextStyle(align="center").items()) == {"align": "center"}
