# bloch_qsim/commands.py
"""Discrete named commands and their mapping onto gates.

Gate commands: hadamard, pauli-x, pauli-y, pauli-z, rotate-x <radians>.
Control commands (outside the quantum model): toggle-animation, quit.
"""
import math
from dataclasses import dataclass
from typing import Optional
from .state import QubitState

# rotate-x step bound to the "r" key
ROTATE_KEY_THETA = 0.1

COMMAND_GATES = {
    "hadamard": "H",
    "pauli-x": "X",
    "pauli-y": "Y",
    "pauli-z": "Z",
    "rotate-x": "RX",
}
CONTROL_COMMANDS = ("toggle-animation", "quit")

ALIASES = {
    "h": "hadamard",
    "x": "pauli-x",
    "y": "pauli-y",
    "z": "pauli-z",
    "rx": "rotate-x",
    "toggle": "toggle-animation",
    "space": "toggle-animation",
    "q": "quit",
    "exit": "quit",
    "esc": "quit",
    "escape": "quit",
}

@dataclass(frozen=True)
class Command:
    name: str
    theta: Optional[float] = None

    @property
    def gate(self) -> Optional[str]:
        return COMMAND_GATES.get(self.name)

    @property
    def is_control(self) -> bool:
        return self.name in CONTROL_COMMANDS

    def __str__(self):
        if self.theta is None:
            return self.name
        return f"{self.name} {self.theta:g}"

def parse_command(text: str) -> Command:
    parts = text.strip().lower().split()
    if not parts:
        raise ValueError("empty command")
    name = ALIASES.get(parts[0], parts[0])
    args = parts[1:]
    if name == "rotate-x":
        if len(args) != 1:
            raise ValueError("rotate-x takes exactly one angle in radians")
        try:
            theta = float(args[0])
        except ValueError:
            raise ValueError(f"bad angle for rotate-x: {args[0]!r}") from None
        if not math.isfinite(theta):
            raise ValueError(f"rotate-x angle must be finite, got {args[0]!r}")
        return Command(name, theta)
    if name in COMMAND_GATES or name in CONTROL_COMMANDS:
        if args:
            raise ValueError(f"{name} takes no arguments")
        return Command(name)
    raise ValueError(f"Unknown command: {parts[0]!r}")

# keyboard bindings of the viewer (matplotlib key names)
KEYMAP = {
    "h": Command("hadamard"),
    "x": Command("pauli-x"),
    "y": Command("pauli-y"),
    "z": Command("pauli-z"),
    "r": Command("rotate-x", ROTATE_KEY_THETA),
    " ": Command("toggle-animation"),
    "space": Command("toggle-animation"),
    "escape": Command("quit"),
}

def transition(state: QubitState, command: Command) -> QubitState:
    """Pure form of dispatch: returns the successor state, `state` is untouched."""
    new = state.copy()
    if command.gate is not None:
        new.apply(command.gate, command.theta)
    return new
