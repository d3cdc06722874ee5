# bloch_qsim/render.py
"""matplotlib renderer: unit sphere, axis glyphs and the Bloch vector.

The renderer only ever reads a 3-vector per frame from the session.
"""
import logging
import os
import numpy as np
import matplotlib.pyplot as plt
from .commands import KEYMAP

logger = logging.getLogger(__name__)

SPHERE_COLOR = (0.2, 0.2, 0.5)
VECTOR_COLOR = "red"
AXIS_COLORS = ("red", "green", "blue")
AXIS_LENGTH = 1.5

def sphere_mesh(sectors=20, stacks=20, radius=1.0):
    u = np.linspace(0, 2 * np.pi, sectors + 1)
    v = np.linspace(0, np.pi, stacks + 1)
    x = radius * np.outer(np.cos(u), np.sin(v))
    y = radius * np.outer(np.sin(u), np.sin(v))
    z = radius * np.outer(np.ones(np.size(u)), np.cos(v))
    return x, y, z

def draw_bloch_sphere(ax, vec, title="", show_axes=True):
    ax.clear()
    x, y, z = sphere_mesh()
    ax.plot_wireframe(x, y, z, color=SPHERE_COLOR, alpha=0.3, linewidth=0.5)

    if show_axes:
        for i, color in enumerate(AXIS_COLORS):
            end = [0.0, 0.0, 0.0]
            end[i] = AXIS_LENGTH
            ax.quiver(0, 0, 0, *end, color=color, alpha=0.7, arrow_length_ratio=0.08, linewidth=1.5)
        ax.text(0, 0, 1.2, '|0⟩', ha='center')
        ax.text(0, 0, -1.3, '|1⟩', ha='center')

    bx, by, bz = (float(c) for c in vec)
    if bx * bx + by * by + bz * bz > 1e-8:
        ax.quiver(0, 0, 0, bx, by, bz, color=VECTOR_COLOR, arrow_length_ratio=0.12, linewidth=2.5)
        ax.scatter([bx], [by], [bz], color=VECTOR_COLOR, s=40)

    lim = [-AXIS_LENGTH, AXIS_LENGTH]
    ax.set_xlim(lim)
    ax.set_ylim(lim)
    ax.set_zlim(lim)
    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.set_zlabel('Z')
    ax.set_title(title)
    ax.set_box_aspect([1, 1, 1])
    return ax

def _new_axes():
    fig = plt.figure(figsize=(6, 6))
    ax = fig.add_subplot(111, projection='3d')
    return fig, ax

def save_bloch_figure(vec, path, title=""):
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    fig, ax = _new_axes()
    draw_bloch_sphere(ax, vec, title=title)
    fig.savefig(path, dpi=200)
    plt.close(fig)
    return path

def plot_trajectory(traj, path, title="Bloch trajectory"):
    """Draw an (n, 3) array of Bloch vectors as a path on the sphere."""
    traj = np.asarray(traj, dtype=np.float64)
    if traj.ndim != 2 or traj.shape[1] != 3:
        raise ValueError(f"trajectory must have shape (n, 3), got {traj.shape}")
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    fig, ax = _new_axes()
    draw_bloch_sphere(ax, traj[-1], title=title)
    ax.plot(traj[:, 0], traj[:, 1], traj[:, 2], color="orange", lw=1.5)
    ax.scatter([traj[0, 0]], [traj[0, 1]], [traj[0, 2]], color="black", s=20)
    fig.savefig(path, dpi=200)
    plt.close(fig)
    return path

def _release_keys(keys):
    # matplotlib binds h, r, x, y, escape ... to toolbar actions by default
    for name in [k for k in plt.rcParams if k.startswith("keymap.")]:
        bound = plt.rcParams[name]
        if isinstance(bound, list):
            plt.rcParams[name] = [k for k in bound if k not in keys]

def run_viewer(session, interval_ms=16):
    """Interactive window: keys -> session commands, one session.tick() per frame."""
    from matplotlib.animation import FuncAnimation

    _release_keys(set(KEYMAP))
    fig, ax = _new_axes()

    def on_key(event):
        cmd = KEYMAP.get(event.key)
        if cmd is not None:
            session.submit(cmd)

    def update(_frame):
        vec = session.tick()
        if not session.running:
            plt.close(fig)
            return []
        state = "animating" if session.animating else "paused"
        draw_bloch_sphere(ax, vec, title=f"({vec[0]:+.3f}, {vec[1]:+.3f}, {vec[2]:+.3f})  {state}")
        return []

    fig.canvas.mpl_connect("key_press_event", on_key)
    anim = FuncAnimation(fig, update, interval=interval_ms, cache_frame_data=False)
    logger.info("viewer: h/x/y/z gates, r rotate-x, space animate, esc quit")
    plt.show()
    return anim
