import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pytest
from bloch_qsim.circuit import Circuit
from bloch_qsim.render import (draw_bloch_sphere, plot_trajectory, save_bloch_figure,
                               sphere_mesh, _release_keys)

def test_sphere_mesh_is_unit():
    x, y, z = sphere_mesh(sectors=12, stacks=8)
    assert x.shape == (13, 9)
    assert np.allclose(x**2 + y**2 + z**2, 1.0)

def test_draw_sets_title_and_limits():
    fig = plt.figure()
    ax = fig.add_subplot(111, projection="3d")
    draw_bloch_sphere(ax, [1.0, 0.0, 0.0], title="plus")
    assert ax.get_title() == "plus"
    assert ax.get_xlabel() == "X"
    plt.close(fig)

def test_save_bloch_figure(tmp_path):
    path = save_bloch_figure([0.0, 0.0, 1.0], str(tmp_path / "zero.png"))
    assert (tmp_path / "zero.png").stat().st_size > 0
    assert path.endswith("zero.png")

def test_plot_trajectory(tmp_path):
    traj = Circuit.empty().h().rx(0.5).rx(0.5).z().trajectory()
    plot_trajectory(traj, str(tmp_path / "t.png"))
    assert (tmp_path / "t.png").exists()
    with pytest.raises(ValueError):
        plot_trajectory(np.zeros((4, 2)), str(tmp_path / "bad.png"))

def test_release_keys_frees_bindings():
    with plt.rc_context():
        _release_keys({"h", "r", "escape"})
        for name in [k for k in plt.rcParams if k.startswith("keymap.")]:
            bound = plt.rcParams[name]
            assert "h" not in bound and "escape" not in bound
