# bloch_qsim/bloch.py
"""Amplitude pair -> Bloch sphere coordinates.

    x = 2 Re(alpha conj(beta))
    y = 2 Im(conj(alpha) beta)
    z = |alpha|^2 - |beta|^2

With RX(theta) = exp(-i theta X / 2) this is the right-handed convention:
RX(pi/2)|0> lands on (0, -1, 0).
"""
import numpy as np

def bloch_components(alpha: complex, beta: complex):
    x = 2.0 * (alpha * np.conj(beta)).real
    y = 2.0 * (np.conj(alpha) * beta).imag
    z = abs(alpha)**2 - abs(beta)**2
    return float(x), float(y), float(z)

def bloch_vector(state) -> np.ndarray:
    """Bloch vector of a QubitState as a float64 array of shape (3,)."""
    return np.array(bloch_components(state.alpha, state.beta), dtype=np.float64)

def bloch_norm(vec) -> float:
    return float(np.linalg.norm(np.asarray(vec, dtype=np.float64)))
