# bloch_qsim/state.py
import numpy as np
from dataclasses import dataclass
from . import apply_serial as S
from .bloch import bloch_vector

@dataclass
class QubitState:
    alpha: complex  # amplitude of |0>
    beta: complex   # amplitude of |1>

    def __post_init__(self):
        self.alpha = complex(self.alpha)
        self.beta = complex(self.beta)

    @staticmethod
    def zero() -> "QubitState":
        return QubitState(alpha=1.0 + 0.0j, beta=0.0 + 0.0j)

    def norm2(self) -> float:
        return float(abs(self.alpha)**2 + abs(self.beta)**2)

    def check_normalized(self, tol=1e-9):
        n2 = self.norm2()
        if not (abs(1.0 - n2) <= tol):
            raise AssertionError(f"Normalization failed: |alpha|^2+|beta|^2={n2}")

    def renormalize(self):
        n = np.sqrt(self.norm2())
        self._write(self.alpha / n, self.beta / n)
        return self

    def copy(self) -> "QubitState":
        return QubitState(self.alpha, self.beta)

    def amplitudes(self):
        return self.alpha, self.beta

    def as_numpy(self) -> np.ndarray:
        return np.array([self.alpha, self.beta], dtype=np.complex128)

    def bloch_vector(self) -> np.ndarray:
        return bloch_vector(self)

    # gates mutate in place; both amplitudes are computed before either is stored

    def _write(self, alpha, beta):
        self.alpha, self.beta = complex(alpha), complex(beta)

    def apply_hadamard(self):
        self._write(*S.hadamard(self.alpha, self.beta))
        return self

    def apply_pauli_x(self):
        self._write(*S.pauli_x(self.alpha, self.beta))
        return self

    def apply_pauli_y(self):
        self._write(*S.pauli_y(self.alpha, self.beta))
        return self

    def apply_pauli_z(self):
        self._write(*S.pauli_z(self.alpha, self.beta))
        return self

    def apply_rotate_x(self, theta: float):
        self._write(*S.rotate_x(self.alpha, self.beta, theta))
        return self

    def apply(self, name: str, theta=None):
        """Apply a gate by canonical name ("H", "X", "Y", "Z", "RX")."""
        self._write(*S.apply_gate(self.alpha, self.beta, name, theta))
        return self
