# bloch_qsim/apply_numba.py
import numpy as np
from numba import njit, prange, set_num_threads, get_num_threads
from .state import QubitState

# ---------- low-level kernels (Numba JIT) ----------

@njit
def _hadamard_kernel(alpha, beta):
    s = 1.0 / np.sqrt(2.0)
    return (alpha + beta) * s, (alpha - beta) * s

@njit
def _pauli_x_kernel(alpha, beta):
    return beta, alpha

@njit
def _pauli_y_kernel(alpha, beta):
    return -1j * beta, 1j * alpha

@njit
def _pauli_z_kernel(alpha, beta):
    return alpha, -beta

@njit
def _rx_kernel(alpha, beta, theta):
    c = np.cos(theta / 2.0)
    s = np.sin(theta / 2.0)
    return c * alpha - 1j * s * beta, -1j * s * alpha + c * beta

@njit
def _bloch_row(alpha, beta, out, i):
    out[i, 0] = 2.0 * (alpha * np.conj(beta)).real
    out[i, 1] = 2.0 * (np.conj(alpha) * beta).imag
    out[i, 2] = abs(alpha)**2 - abs(beta)**2

@njit
def _animate_kernel(alpha, beta, theta, out):
    # sequential: each tick depends on the previous one
    c = np.cos(theta / 2.0)
    s = np.sin(theta / 2.0)
    for t in range(out.shape[0]):
        a = c * alpha - 1j * s * beta
        b = -1j * s * alpha + c * beta
        alpha = a
        beta = b
        _bloch_row(alpha, beta, out, t)
    return alpha, beta

@njit(parallel=True, fastmath=True)
def _bloch_batch_kernel(alphas, betas, out):
    for i in prange(alphas.shape[0]):
        _bloch_row(alphas[i], betas[i], out, i)

# ---------- user-facing apply helpers ----------

_KERNELS = {
    "H": _hadamard_kernel,
    "X": _pauli_x_kernel,
    "Y": _pauli_y_kernel,
    "Z": _pauli_z_kernel,
}

def set_threads(n: int):
    set_num_threads(n)

def get_threads() -> int:
    return get_num_threads()

def apply_gate(state: QubitState, name: str, theta=None):
    if name == "RX":
        if theta is None:
            raise ValueError("RX needs an angle")
        a, b = _rx_kernel(state.alpha, state.beta, float(theta))
    elif name in _KERNELS:
        a, b = _KERNELS[name](state.alpha, state.beta)
    else:
        raise ValueError(f"Unknown gate {name}")
    state.alpha, state.beta = complex(a), complex(b)
    return state

def apply_RX(state: QubitState, theta: float):
    return apply_gate(state, "RX", theta)

def animate(state: QubitState, theta: float, ticks: int) -> np.ndarray:
    """Run `ticks` RX(theta) steps in place; returns the (ticks, 3) Bloch trajectory."""
    if int(ticks) < 0:
        raise ValueError(f"ticks must be >= 0, got {ticks}")
    out = np.empty((int(ticks), 3), dtype=np.float64)
    a, b = _animate_kernel(state.alpha, state.beta, float(theta), out)
    state.alpha, state.beta = complex(a), complex(b)
    return out

def bloch_batch(alphas: np.ndarray, betas: np.ndarray) -> np.ndarray:
    alphas = np.ascontiguousarray(alphas, dtype=np.complex128)
    betas = np.ascontiguousarray(betas, dtype=np.complex128)
    if alphas.shape != betas.shape:
        raise ValueError("alphas and betas must have the same shape")
    out = np.empty((alphas.shape[0], 3), dtype=np.float64)
    _bloch_batch_kernel(alphas, betas, out)
    return out
