# bloch_qsim/circuit.py
from dataclasses import dataclass
from typing import List, Tuple
import numpy as np
from .state import QubitState
from .bloch import bloch_vector
from .gates import GATES

Op = Tuple[str, Tuple]  # e.g., ("H",()) or ("RX",(theta,))

@dataclass
class Circuit:
    ops: List[Op]

    @staticmethod
    def empty() -> "Circuit":
        return Circuit([])

    def h(self): self.ops.append(("H",())); return self
    def x(self): self.ops.append(("X",())); return self
    def y(self): self.ops.append(("Y",())); return self
    def z(self): self.ops.append(("Z",())); return self
    def rx(self, theta:float): self.ops.append(("RX",(float(theta),))); return self

    def add(self, name:str, *params):
        if name not in GATES:
            raise ValueError(f"Unknown gate {name}")
        if len(params) != GATES[name]:
            raise ValueError(f"{name} takes {GATES[name]} parameter(s), got {len(params)}")
        self.ops.append((name, tuple(float(p) for p in params)))
        return self

    def _applier(self, backend, num_threads=None):
        if backend == "serial":
            return lambda st, name, args: st.apply(name, *args)
        elif backend == "numba":
            try:
                from .apply_numba import apply_gate, set_threads
            except Exception as e:
                raise RuntimeError("Numba backend not available. Did you `pip install numba`?") from e
            if num_threads is not None:
                set_threads(int(num_threads))
            return lambda st, name, args: apply_gate(st, name, *args)
        else:
            raise NotImplementedError(f"Unknown backend: {backend}")

    def run(self, backend:str="serial", renormalize=False, check_norm=True, check_norm_tol=1e-6, num_threads=None) -> QubitState:
        st = QubitState.zero()
        ap = self._applier(backend, num_threads)
        for name, args in self.ops:
            ap(st, name, args)
            if renormalize:
                st.renormalize()
        if check_norm:
            st.check_normalized(tol=check_norm_tol)
        return st

    def trajectory(self, backend:str="serial", renormalize=False, num_threads=None) -> np.ndarray:
        """Bloch vector before any op, then after each op: shape (len(ops)+1, 3)."""
        st = QubitState.zero()
        ap = self._applier(backend, num_threads)
        out = np.empty((len(self.ops) + 1, 3), dtype=np.float64)
        out[0] = bloch_vector(st)
        for i, (name, args) in enumerate(self.ops, start=1):
            ap(st, name, args)
            if renormalize:
                st.renormalize()
            out[i] = bloch_vector(st)
        return out
