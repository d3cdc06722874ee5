# bloch_qsim/apply_serial.py
import numpy as np

# closed-form single-qubit updates over an amplitude pair (alpha, beta).
# Each returns the new pair; callers write both back together.

INV_SQRT2 = 1.0 / np.sqrt(2.0)

def hadamard(alpha: complex, beta: complex):
    return (alpha + beta) * INV_SQRT2, (alpha - beta) * INV_SQRT2

def pauli_x(alpha: complex, beta: complex):
    return beta, alpha

def pauli_y(alpha: complex, beta: complex):
    return -1j * beta, 1j * alpha

def pauli_z(alpha: complex, beta: complex):
    return alpha, -beta

def rotate_x(alpha: complex, beta: complex, theta: float):
    """exp(-i*theta*X/2); theta in radians, RX(a) then RX(b) == RX(a+b)."""
    c = np.cos(theta / 2.0)
    s = np.sin(theta / 2.0)
    return c * alpha - 1j * s * beta, -1j * s * alpha + c * beta

def apply_matrix(alpha: complex, beta: complex, U2: np.ndarray):
    """Apply a general 2x2 gate U2 to the pair."""
    assert U2.shape == (2, 2)
    return U2[0, 0] * alpha + U2[0, 1] * beta, U2[1, 0] * alpha + U2[1, 1] * beta

# name -> closed-form update, as used by Circuit.run and the session
SINGLE_QUBIT = {
    "H": hadamard,
    "X": pauli_x,
    "Y": pauli_y,
    "Z": pauli_z,
}

def apply_gate(alpha: complex, beta: complex, name: str, theta=None):
    if name == "RX":
        if theta is None:
            raise ValueError("RX needs an angle")
        return rotate_x(alpha, beta, float(theta))
    try:
        fn = SINGLE_QUBIT[name]
    except KeyError:
        raise ValueError(f"Unknown gate {name}") from None
    return fn(alpha, beta)
