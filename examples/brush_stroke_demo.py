"""
Headless deform map painting demo.

Paints a short line of strokes in both paint modes, saves the texture,
reloads it and checks the round trip. Also times a large-sigma stroke.

Run:
    python examples/brush_stroke_demo.py [output_dir]
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import time

from DM_Libs.SessionLib.painter_session import PainterSession, PointerButton
from DM_Libs.SessionLib.painter_settings import PaintMode, PainterSettings
from DM_Libs.PaintLib.gaussian_brush import BrushStroke


def paint_line(session, start, end, steps, button):
    """Paint evenly spaced strokes between two normalized positions."""
    for i in range(steps + 1):
        t = i / steps
        u = start[0] + (end[0] - start[0]) * t
        v = start[1] + (end[1] - start[1]) * t
        session.paint_at(u, v, button)


def benchmark_stroke(session, sigma, iterations=5):
    print(f"\nBenchmarking sigma={sigma} on {session.width}x{session.height}")
    print("-" * 60)
    stroke = BrushStroke(
        center_x=session.width / 2,
        center_y=session.height / 2,
        sigma=sigma,
        power=0.01,
    )
    times = []
    for i in range(iterations):
        start = time.time()
        touched = session.apply_stroke(stroke)
        elapsed = time.time() - start
        times.append(elapsed)
        print(f"  Run {i+1}: {elapsed * 1000:.2f}ms ({touched} pixels)")
    print(f"Average: {sum(times) / len(times) * 1000:.2f}ms")


def main():
    output_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()

    settings = PainterSettings(init_size=(256, 256), paint_power=0.2, paint_sigma=12.0)
    session = PainterSession(settings, data_dir=output_dir)

    paint_line(session, (0.2, 0.5), (0.8, 0.5), 30, PointerButton.PRIMARY)
    settings.paint_mode = PaintMode.SCALE_Y
    paint_line(session, (0.5, 0.2), (0.5, 0.8), 30, PointerButton.SECONDARY)

    readout = session.inspect_pixel(0.5, 0.5)
    print("Center pixel:")
    print(readout.format())

    saved = session.save_texture()
    print(f"\n{session.status_message}")

    painted = session.buffer.copy()
    session.initialize_texture()
    if not session.load_texture(saved):
        print(session.status_message)
        return 1

    print(session.status_message)
    print(f"Round trip exact: {session.buffer == painted}")

    benchmark_stroke(session, sigma=64.0)
    return 0


if __name__ == "__main__":
    sys.exit(main())
