from enum import Enum
from typing import Optional

from .car_state import CarState, Direction, SensorLayout, DEFAULT_LAYOUT


class UnknownCommandError(ValueError):
    """Raised when an inbound token is not part of the command protocol"""
    def __init__(self, token: str):
        super().__init__(f"Unrecognized command: {token!r}")
        self.token = token


class Command(Enum):
    """Inbound protocol commands"""
    M_UP = "M_UP"
    M_DOWN = "M_DOWN"
    M_STOP = "M_STOP"
    RESET = "RESET"


_DIRECTIONS = {
    Command.M_UP: Direction.UP,
    Command.M_DOWN: Direction.DOWN,
    Command.M_STOP: Direction.STOPPED,
}


def normalize_token(token: str) -> str:
    return token.strip().upper()


def parse_command(token: str) -> Command:
    """
    Parse one inbound token (case-insensitive, surrounding whitespace ignored).

    Raises:
        UnknownCommandError: If the token is not a protocol command
    """
    try:
        return Command(normalize_token(token))
    except ValueError:
        raise UnknownCommandError(token) from None


class CommandRouter:
    """
    Applies protocol commands to a CarState.

    While the car is crashed only RESET is honoured; every other command is
    dropped without an error (control lockout).
    """
    def __init__(self, layout: SensorLayout = DEFAULT_LAYOUT):
        self.layout = layout

    def apply(self, state: CarState, command: Command) -> bool:
        """
        Apply a command.

        Returns:
            True if the command was accepted, False if it was locked out
        """
        if command is Command.RESET:
            state.reinitialize(self.layout)
            return True

        if state.crashed:
            return False

        state.direction = _DIRECTIONS[command]
        return True

    def apply_token(self, state: CarState, token: str) -> Optional[Command]:
        """
        Parse and apply a raw token.

        Returns:
            The applied Command, or None if it was locked out

        Raises:
            UnknownCommandError: If the token is not a protocol command
        """
        command = parse_command(token)
        return command if self.apply(state, command) else None

    def resync(self, state: CarState):
        """Forget the latched sensor so the current floor is reported again"""
        state.last_triggered_sensor = None
