# bloch_qsim/gates.py
import numpy as np

# reference matrices; the simulator itself uses the closed forms in apply_serial

def H(dtype=np.complex128) -> np.ndarray:
    s = np.sqrt(0.5)
    return np.array([[s, s],
                     [s, -s]], dtype=dtype)

def X(dtype=np.complex128) -> np.ndarray:
    return np.array([[0, 1],
                     [1, 0]], dtype=dtype)

def Y(dtype=np.complex128) -> np.ndarray:
    return np.array([[0, -1j],
                     [1j, 0]], dtype=dtype)

def Z(dtype=np.complex128) -> np.ndarray:
    return np.array([[1, 0],
                     [0, -1]], dtype=dtype)

def RX(theta: float, dtype=np.complex128) -> np.ndarray:
    c = np.cos(theta/2.0)
    s = -1j*np.sin(theta/2.0)
    return np.array([[c, s],
                     [s, c]], dtype=dtype)

# gate name -> number of float parameters
GATES = {"H": 0, "X": 0, "Y": 0, "Z": 0, "RX": 1}

def matrix(name: str, theta=None, dtype=np.complex128) -> np.ndarray:
    if name == "RX":
        return RX(theta, dtype=dtype)
    table = {"H": H, "X": X, "Y": Y, "Z": Z}
    if name not in table:
        raise ValueError(f"Unknown gate {name}")
    return table[name](dtype=dtype)
