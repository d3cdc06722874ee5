from .state import QubitState
from .bloch import bloch_components, bloch_vector
from .circuit import Circuit
from .commands import Command, parse_command, transition
from .session import Session, SessionConfig
