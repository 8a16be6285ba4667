"""
Command router tests

Token parsing at the protocol boundary, direction changes, RESET and the
crash lockout.
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(project_root))

import dataclasses

import pytest

from simulator.core.car_state import CarState, Direction, SensorLayout
from simulator.core.command_router import (
    Command, CommandRouter, UnknownCommandError, parse_command
)


@pytest.fixture
def router():
    return CommandRouter()


@pytest.mark.parametrize("token, expected", [
    ("M_UP", Command.M_UP),
    ("m_down", Command.M_DOWN),
    ("  M_Stop\r", Command.M_STOP),
    ("reset\n", Command.RESET),
])
def test_parse_command_normalizes_tokens(token, expected):
    assert parse_command(token) is expected


@pytest.mark.parametrize("token", ["", "UP", "M_UPP", "OPEN_DOOR", "1"])
def test_parse_command_rejects_unknown_tokens(token):
    with pytest.raises(UnknownCommandError) as exc_info:
        parse_command(token)
    assert exc_info.value.token == token
    assert isinstance(exc_info.value, ValueError)


def test_motion_commands_set_direction(router):
    state = CarState.initial()

    router.apply(state, Command.M_UP)
    assert state.direction is Direction.UP

    router.apply(state, Command.M_DOWN)
    assert state.direction is Direction.DOWN

    router.apply(state, Command.M_STOP)
    assert state.direction is Direction.STOPPED


def test_motion_commands_do_not_move_the_car(router):
    state = CarState(position=42.0, last_triggered_sensor=None)

    router.apply(state, Command.M_UP)

    assert state.position == 42.0
    assert state.crashed is False


def test_apply_token_parses_and_applies(router):
    state = CarState.initial()

    assert router.apply_token(state, " m_up ") is Command.M_UP
    assert state.direction is Direction.UP


def test_apply_token_leaves_state_untouched_on_unknown_token(router):
    state = CarState(position=37.0, direction=Direction.DOWN, last_triggered_sensor=1)
    before = dataclasses.replace(state)

    with pytest.raises(UnknownCommandError):
        router.apply_token(state, "JUMP")

    assert state == before


@pytest.mark.parametrize("command", [Command.M_UP, Command.M_DOWN, Command.M_STOP])
def test_crashed_car_ignores_motion_commands(router, command):
    state = CarState(position=100.0, direction=Direction.STOPPED, crashed=True, last_triggered_sensor=2)
    before = dataclasses.replace(state)

    assert router.apply(state, command) is False
    assert state == before


def test_apply_token_reports_lockout_as_none(router):
    state = CarState(crashed=True)

    assert router.apply_token(state, "M_UP") is None


def test_reset_clears_crash(router):
    state = CarState(position=0.0, direction=Direction.DOWN, crashed=True, last_triggered_sensor=0)

    assert router.apply(state, Command.RESET) is True

    assert state.crashed is False
    assert state.position == 10.0
    assert state.direction is Direction.STOPPED
    assert state.last_triggered_sensor is None


def test_reset_is_idempotent(router):
    state = CarState(position=73.2, direction=Direction.UP, last_triggered_sensor=None)

    router.apply(state, Command.RESET)
    once = state.snapshot()
    router.apply(state, Command.RESET)

    assert state.snapshot() == once


def test_reset_uses_layout_home_position():
    router = CommandRouter(SensorLayout((25.0, 75.0), 4.0))
    state = CarState(position=60.0, direction=Direction.UP)

    router.apply(state, Command.RESET)

    assert state.position == 25.0


def test_resync_forgets_latched_sensor(router):
    state = CarState(position=50.0, last_triggered_sensor=1)

    router.resync(state)

    assert state.last_triggered_sensor is None
    assert state.position == 50.0
