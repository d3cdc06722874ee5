# bloch_qsim/session.py
import logging
from collections import deque
from dataclasses import dataclass
from typing import Union
import numpy as np
from .state import QubitState
from .commands import Command, parse_command

logger = logging.getLogger(__name__)

@dataclass
class SessionConfig:
    tick_theta: float = 0.01      # RX angle per animation frame (radians)
    renormalize_every: int = 0    # renormalize after every N gates; 0 = never
    norm_tol: float = 1e-6

class Session:
    """Single owner and mutator of one QubitState.

    Commands are applied strictly in the order they arrive; `submit` queues
    them and `process_pending` drains the queue into the same mutator, so a
    command is fully applied before the next projection is taken.
    """

    def __init__(self, config: SessionConfig = None):
        self.config = config or SessionConfig()
        self.state = QubitState.zero()
        self.animating = False
        self.running = True
        self.gates_applied = 0
        self.ticks = 0
        self.rotation_angle = 0.0   # total RX angle fired by the animation
        self._pending = deque()

    # ---- queries ----

    def get_state(self):
        return self.state.amplitudes()

    def get_bloch_vector(self) -> np.ndarray:
        return self.state.bloch_vector()

    # ---- mutation ----

    def apply(self, gate: str, theta=None):
        if not self.running:
            logger.info("session terminated; ignoring %s", gate)
            return self.state
        self.state.apply(gate, theta)
        self.gates_applied += 1
        every = self.config.renormalize_every
        if every > 0 and self.gates_applied % every == 0:
            drift = abs(1.0 - self.state.norm2())
            self.state.renormalize()
            logger.debug("renormalized after %d gates (drift %.3e)", self.gates_applied, drift)
        return self.state

    def toggle_animation(self) -> bool:
        self.animating = not self.animating
        logger.debug("animation %s", "on" if self.animating else "off")
        return self.animating

    def terminate(self):
        self.running = False
        self.animating = False
        logger.debug("session terminated after %d gates", self.gates_applied)

    def dispatch(self, command: Union[Command, str]) -> Command:
        if isinstance(command, str):
            command = parse_command(command)
        logger.debug("dispatch %s", command)
        if command.gate is not None:
            self.apply(command.gate, command.theta)
        elif command.name == "toggle-animation":
            self.toggle_animation()
        elif command.name == "quit":
            self.terminate()
        else:
            raise ValueError(f"Unknown command: {command.name!r}")
        return command

    def tick(self) -> np.ndarray:
        """One frame: fire the animation rotation if enabled, then project."""
        self.process_pending()
        if self.animating and self.running:
            self.apply("RX", self.config.tick_theta)
            self.rotation_angle += self.config.tick_theta
        self.ticks += 1
        return self.get_bloch_vector()

    def run_ticks(self, ticks: int, backend: str = "serial", num_threads=None) -> np.ndarray:
        """Advance `ticks` frames; returns the (ticks, 3) trajectory, one row per frame.

        The numba path runs the JIT kernel between renormalization points, so
        both backends follow the same running/animating/renormalize rules.
        """
        ticks = int(ticks)
        if ticks < 0:
            raise ValueError(f"ticks must be >= 0, got {ticks}")
        if backend == "serial":
            return np.array([self.tick() for _ in range(ticks)]).reshape(-1, 3)
        if backend != "numba":
            raise NotImplementedError(f"Unknown backend: {backend}")
        try:
            from .apply_numba import animate, set_threads
        except Exception as e:
            raise RuntimeError("Numba backend not available. Did you `pip install numba`?") from e
        if num_threads is not None:
            set_threads(int(num_threads))

        self.process_pending()
        if not (self.animating and self.running):
            self.ticks += ticks
            return np.tile(self.get_bloch_vector(), (ticks, 1))

        theta = self.config.tick_theta
        every = self.config.renormalize_every
        chunks = []
        left = ticks
        while left > 0:
            n = left if every <= 0 else min(left, every - self.gates_applied % every)
            traj = animate(self.state, theta, n)
            self.gates_applied += n
            self.ticks += n
            self.rotation_angle += theta * n
            left -= n
            if every > 0 and self.gates_applied % every == 0:
                self.state.renormalize()
                traj[-1] = self.get_bloch_vector()
                logger.debug("renormalized after %d gates", self.gates_applied)
            chunks.append(traj)
        return np.vstack(chunks) if chunks else np.empty((0, 3), dtype=np.float64)

    # ---- event queue ----

    def submit(self, command: Union[Command, str]):
        if isinstance(command, str):
            command = parse_command(command)
        self._pending.append(command)

    def process_pending(self) -> int:
        n = 0
        while self._pending:
            self.dispatch(self._pending.popleft())
            n += 1
        return n
