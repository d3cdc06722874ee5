import numpy as np
import pytest
from bloch_qsim.circuit import Circuit
from bloch_qsim.state import QubitState

def almost(p, q, tol=1e-9):
    return np.allclose(p, q, atol=tol, rtol=0)

def random_states(count, seed=0):
    rng = np.random.default_rng(seed)
    for _ in range(count):
        v = rng.normal(size=4)
        st = QubitState(complex(v[0], v[1]), complex(v[2], v[3]))
        yield st.renormalize()

def random_circuit(depth, seed=0):
    rng = np.random.default_rng(seed)
    c = Circuit.empty()
    for _ in range(depth):
        g = int(rng.integers(0, 5))
        if g == 0: c.h()
        elif g == 1: c.x()
        elif g == 2: c.y()
        elif g == 3: c.z()
        else: c.rx(float(rng.uniform(-np.pi, np.pi)))
    return c

@pytest.mark.parametrize("gate", ["H", "X", "Y", "Z"])
def test_self_inverse(gate):
    for st in random_states(25, seed=1):
        before = st.as_numpy()
        st.apply(gate).apply(gate)
        assert almost(st.as_numpy(), before)

def test_rotation_composes():
    rng = np.random.default_rng(2)
    for st in random_states(25, seed=3):
        a, b = rng.uniform(-20, 20, size=2)
        two = st.copy().apply_rotate_x(a).apply_rotate_x(b)
        one = st.copy().apply_rotate_x(a + b)
        assert almost(two.as_numpy(), one.as_numpy())

def test_rotation_periodicity():
    for st in random_states(10, seed=4):
        turned = st.copy().apply_rotate_x(2 * np.pi)
        # global phase of -1, same point on the sphere
        assert almost(turned.as_numpy(), -st.as_numpy())
        assert almost(turned.bloch_vector(), st.bloch_vector())
        assert almost(st.copy().apply_rotate_x(4 * np.pi).as_numpy(), st.as_numpy())

def test_normalization_holds_over_long_sequences():
    for seed in range(3):
        c = random_circuit(5000, seed=seed)
        st = c.run(check_norm_tol=1e-6)
        assert abs(1.0 - st.norm2()) < 1e-6

def test_many_small_rotations_stay_normalized():
    st = QubitState.zero()
    for _ in range(100_000):
        st.apply_rotate_x(0.01)
    assert abs(1.0 - st.norm2()) < 1e-6
    assert almost(st.bloch_vector(), [0, -np.sin(1000.0), np.cos(1000.0)], tol=1e-6)

def test_bloch_norm_bound():
    traj = random_circuit(500, seed=9).trajectory()
    norms = np.sum(traj**2, axis=1)
    assert np.all(norms <= 1 + 1e-6)
    assert np.allclose(norms, 1.0, atol=1e-9)

def test_renormalize_pulls_state_back():
    st = QubitState(1.2 + 0j, 0.3j)
    with pytest.raises(AssertionError):
        st.check_normalized()
    st.renormalize()
    st.check_normalized()
    c = Circuit.empty().h().rx(0.1)
    assert abs(1.0 - c.run(renormalize=True).norm2()) < 1e-12

def test_gates_do_not_mutate_inputs_until_written():
    # Y reads beta and alpha before storing either
    st = QubitState(0.6, 0.8)
    st.apply_pauli_y()
    assert almost(st.as_numpy(), [-0.8j, 0.6j])
