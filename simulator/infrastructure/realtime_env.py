"""
realtime_env.py

SimPy environment that paces the fixed-tick loop against the wall clock.
"""

import simpy
import time


class RealtimeEnvironment(simpy.Environment):
    """
    SimPy environment with real-time pacing.

    After every step the environment sleeps until the wall clock catches up
    with simulation time scaled by speed_factor. If the simulation falls
    behind, no sleep happens and the shortfall is kept in max_lag.

    Args:
        speed_factor (float): Speed multiplier for simulation
            - 1.0 = real-time (one 16 ms tick takes 16 ms)
            - 2.0 = double speed
            - 0.0 = no pacing (plain SimPy behaviour)

    Example:
        >>> env = RealtimeEnvironment(speed_factor=1.0)
        >>> env.run(until=5.0)  # ~5 wall-clock seconds
    """

    def __init__(self, speed_factor=1.0, initial_time=0):
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        super().__init__(initial_time=initial_time)
        self.speed_factor = speed_factor
        self.max_lag = 0.0
        self._anchor()

    def _anchor(self):
        self.real_start_time = time.monotonic()
        self.sim_start_time = self.now

    def step(self):
        """Execute one simulation step, then wait for the wall clock"""
        result = super().step()

        if self.speed_factor > 0:
            sim_elapsed = self.now - self.sim_start_time
            target = self.real_start_time + sim_elapsed / self.speed_factor
            delay = target - time.monotonic()
            if delay > 0:
                time.sleep(delay)
            else:
                self.max_lag = max(self.max_lag, -delay)

        return result

    def set_speed(self, speed_factor):
        """
        Change pacing at runtime.

        Timing references are re-anchored so the new factor applies from now on.
        """
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        self.speed_factor = speed_factor
        self._anchor()

    def get_speed(self):
        """Current speed_factor"""
        return self.speed_factor
