# bloch_qsim/cli.py
import argparse, csv, logging, os, sys
import numpy as np
from .session import Session, SessionConfig
from .commands import parse_command
from .state import QubitState

logger = logging.getLogger(__name__)

HEADER = ["step","command","alpha_re","alpha_im","beta_re","beta_im","x","y","z","norm2"]
TRAJ_HEADER = ["step","command","x","y","z"]

def new_csv(path, fieldnames=HEADER):
    """Create/overwrite CSV with header."""
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", newline="") as f:
        csv.DictWriter(f, fieldnames=fieldnames).writeheader()

def write_rows(path, rows, fieldnames=HEADER):
    with open(path, "a", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        for row in rows:
            w.writerow(row)

def state_row(step, command, state: QubitState, vec=None):
    if vec is None:
        vec = state.bloch_vector()
    return {
        "step": step, "command": command,
        "alpha_re": f"{state.alpha.real:.12g}", "alpha_im": f"{state.alpha.imag:.12g}",
        "beta_re": f"{state.beta.real:.12g}", "beta_im": f"{state.beta.imag:.12g}",
        "x": f"{vec[0]:.12g}", "y": f"{vec[1]:.12g}", "z": f"{vec[2]:.12g}",
        "norm2": f"{state.norm2():.15g}",
    }

def format_state(state: QubitState) -> str:
    def fmt(z):
        sign = '+' if z.imag >= 0 else '-'
        return f"{z.real:.4f}{sign}{abs(z.imag):.4f}j"
    x, y, z = (round(float(c), 4) + 0.0 for c in state.bloch_vector())  # no "-0.0000"
    return f"{fmt(state.alpha)}|0⟩ + {fmt(state.beta)}|1⟩  bloch=({x:+.4f}, {y:+.4f}, {z:+.4f})"

def non_negative_int(text):
    n = int(text)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n

def session_from_args(args) -> Session:
    return Session(SessionConfig(tick_theta=args.tick_theta,
                                 renormalize_every=args.renormalize_every))

# ---------------------------------------------------------------------
# subcommands

def cmd_run(args):
    sess = session_from_args(args)
    try:
        cmds = [parse_command(c) for c in args.commands]
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    rows = [state_row(0, "init", sess.state)]
    print(f"  0  {'init':<18} {format_state(sess.state)}")
    for i, c in enumerate(cmds, start=1):
        sess.dispatch(c)
        rows.append(state_row(i, str(c), sess.state))
        print(f"{i:3d}  {str(c):<18} {format_state(sess.state)}")
        if not sess.running:
            break
    if args.csv:
        new_csv(args.csv)
        write_rows(args.csv, rows)
        print(f"wrote {len(rows)} rows → {args.csv}")
    if args.plot:
        from .render import save_bloch_figure
        save_bloch_figure(sess.get_bloch_vector(), args.plot, title=" ".join(args.commands))
        print(f"saved {args.plot}")
    return 0

def cmd_animate(args):
    sess = session_from_args(args)
    theta = args.theta if args.theta is not None else sess.config.tick_theta
    for c in args.prepare:
        sess.dispatch(c)
    start = sess.get_bloch_vector()
    sess.config.tick_theta = theta
    if not sess.animating:
        sess.toggle_animation()
    traj = sess.run_ticks(args.ticks, backend=args.backend, num_threads=args.threads)
    traj = np.vstack([start, traj])
    logger.info("animated %d ticks of %.4g rad (%s)", args.ticks, theta, args.backend)
    print(f"after {args.ticks} ticks: {format_state(sess.state)}  |1-norm2|={abs(1 - sess.state.norm2()):.3e}")
    if args.csv:
        new_csv(args.csv, TRAJ_HEADER)
        write_rows(args.csv, [
            {"step": i, "command": "init" if i == 0 else f"rotate-x {theta:g}",
             "x": f"{v[0]:.12g}", "y": f"{v[1]:.12g}", "z": f"{v[2]:.12g}"}
            for i, v in enumerate(traj)], TRAJ_HEADER)
        print(f"wrote {len(traj)} rows → {args.csv}")
    if args.plot:
        from .render import plot_trajectory
        plot_trajectory(traj, args.plot)
        print(f"saved {args.plot}")
    return 0

def cmd_repl(args, stdin=None):
    stdin = stdin or sys.stdin
    sess = session_from_args(args)
    print(format_state(sess.state))
    for line in stdin:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        if parts[0].lower() == "tick":
            # advance frames so toggle-animation has something to drive
            try:
                n = non_negative_int(parts[1]) if len(parts) == 2 else 1
                if len(parts) > 2:
                    raise ValueError("tick takes at most one count")
            except (ValueError, argparse.ArgumentTypeError) as e:
                print(f"error: {e}", file=sys.stderr)
                continue
            sess.run_ticks(n)
            print(f"tick {sess.ticks}: {format_state(sess.state)}")
            continue
        try:
            c = sess.dispatch(line)
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            continue
        if not sess.running:
            break
        if c.gate is None:
            print(f"animation {'on' if sess.animating else 'off'}")
        else:
            print(format_state(sess.state))
    return 0

def cmd_view(args):
    from .render import run_viewer
    run_viewer(session_from_args(args), interval_ms=args.interval)
    return 0

# ---------------------------------------------------------------------

def build_parser():
    p = argparse.ArgumentParser(prog="bloch_qsim", description="single-qubit Bloch sphere simulator")
    p.add_argument("--tick-theta", type=float, default=0.01, help="RX angle per animation tick (radians)")
    p.add_argument("--renormalize-every", type=int, default=0, help="renormalize after every N gates (0 = never)")
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="apply commands, e.g. hadamard 'rotate-x 0.5'")
    p_run.add_argument("commands", nargs="+")
    p_run.add_argument("--csv", type=str, default=None)
    p_run.add_argument("--plot", type=str, default=None)

    p_anim = sub.add_parser("animate", help="run N animation ticks")
    p_anim.add_argument("--ticks", type=non_negative_int, default=628)
    p_anim.add_argument("--theta", type=float, default=None)
    p_anim.add_argument("--prepare", type=parse_command, nargs="*", default=[],
                        help="commands applied before animating")
    p_anim.add_argument("--backend", type=str, default="serial", choices=["serial","numba"])
    p_anim.add_argument("--threads", type=int, default=None, help="numba thread count")
    p_anim.add_argument("--csv", type=str, default=None)
    p_anim.add_argument("--plot", type=str, default=None)

    sub.add_parser("repl", help="read commands from stdin; 'tick [N]' advances animation frames")

    p_view = sub.add_parser("view", help="interactive matplotlib viewer")
    p_view.add_argument("--interval", type=int, default=16, help="frame interval (ms)")
    return p

def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    handlers = {"run": cmd_run, "animate": cmd_animate, "repl": cmd_repl, "view": cmd_view}
    return handlers[args.cmd](args)

if __name__ == "__main__":
    sys.exit(main())
