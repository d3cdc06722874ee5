import numpy as np
from bloch_qsim.circuit import Circuit
from bloch_qsim.state import QubitState
from bloch_qsim.bloch import bloch_components, bloch_vector, bloch_norm
from bloch_qsim import apply_serial as S
from bloch_qsim import gates as G

S2 = 1.0 / np.sqrt(2.0)

def almost(p, q, tol=1e-9):
    return np.allclose(p, q, atol=tol, rtol=0)

def test_initial_state_points_up():
    st = QubitState.zero()
    assert st.amplitudes() == (1+0j, 0j)
    assert almost(st.bloch_vector(), [0, 0, 1])

def test_h_on_zero():
    st = Circuit.empty().h().run()
    assert almost(st.as_numpy(), [S2, S2])
    assert almost(st.bloch_vector(), [1, 0, 0])

def test_x_flips():
    st = Circuit.empty().x().run()
    assert almost(st.as_numpy(), [0, 1])
    assert almost(st.bloch_vector(), [0, 0, -1])

def test_y_on_zero():
    st = Circuit.empty().y().run()
    assert almost(st.as_numpy(), [0, 1j])
    assert almost(st.bloch_vector(), [0, 0, -1])

def test_z_on_zero_is_noop():
    st = Circuit.empty().z().run()
    assert almost(st.as_numpy(), [1, 0])

def test_z_on_plus_flips_x():
    st = Circuit.empty().h().z().run()
    assert almost(st.as_numpy(), [S2, -S2])
    assert almost(st.bloch_vector(), [-1, 0, 0])

def test_y_on_plus_flips_x():
    st = Circuit.empty().h().y().run()
    assert almost(st.bloch_vector(), [-1, 0, 0])

def test_s_state_on_plus_y_axis():
    # (|0> + i|1>)/sqrt2 sits on +y
    assert almost(bloch_components(S2, 1j * S2), [0, 1, 0])

def test_quarter_rotation():
    st = Circuit.empty().rx(np.pi / 2).run()
    assert almost(st.as_numpy(), [np.cos(np.pi / 4), -1j * np.sin(np.pi / 4)])
    # right-handed rotation about +x takes +z to -y
    assert almost(st.bloch_vector(), [0, -1, 0])

def test_rx_from_zero_matches_analytic():
    for theta in np.linspace(-7.0, 7.0, 29):
        v = Circuit.empty().rx(theta).run().bloch_vector()
        assert almost(v, [0.0, -np.sin(theta), np.cos(theta)])

def test_closed_form_matches_matrices():
    rng = np.random.default_rng(7)
    for _ in range(20):
        v = rng.normal(size=4)
        a, b = complex(v[0], v[1]), complex(v[2], v[3])
        n = np.sqrt(abs(a)**2 + abs(b)**2)
        a, b = a / n, b / n
        theta = float(rng.uniform(-10, 10))
        for name in ("H", "X", "Y", "Z", "RX"):
            th = theta if name == "RX" else None
            got = S.apply_gate(a, b, name, th)
            want = G.matrix(name, th) @ np.array([a, b])
            assert almost(got, want)
            assert almost(S.apply_matrix(a, b, G.matrix(name, th)), want)

def test_bloch_vector_shape_and_norm():
    st = Circuit.empty().h().rx(0.3).y().run()
    v = bloch_vector(st)
    assert v.shape == (3,) and v.dtype == np.float64
    assert abs(bloch_norm(v) - 1.0) < 1e-9

def test_normalization():
    st = Circuit.empty().h().rx(0.7).y().h().z().rx(-2.1).run()
    assert abs(1.0 - st.norm2()) < 1e-9

def test_unknown_gate_rejected():
    import pytest
    with pytest.raises(ValueError):
        Circuit.empty().add("CNOT")
    with pytest.raises(ValueError):
        Circuit.empty().add("RX")
    with pytest.raises(NotImplementedError):
        Circuit.empty().h().run(backend="cupy")

def test_trajectory_rows():
    traj = Circuit.empty().h().z().x().trajectory()
    assert traj.shape == (4, 3)
    assert almost(traj[0], [0, 0, 1])
    assert almost(traj[1], [1, 0, 0])
    assert almost(traj[2], [-1, 0, 0])
    assert almost(traj[3], [-1, 0, 0])
