"""The heartbeat line drawn between the two card sections."""

from .surface import Point, ScaledSurface

# Authored width of the path; drawn widths scale horizontally from this
CANONICAL_WIDTH = 260

STROKE_WIDTH = 0.7
STROKE_COLOR = (221, 221, 221, 178)  # rgba(221,221,221,0.7)

# Steps used to flatten each quadratic segment
CURVE_STEPS = 8

# (command, points...) with M = move, L = line, Q = quadratic (control, end)
PULSE_PATH = (
    ("M", (0, 12)),
    ("L", (95, 12)),
    ("Q", (100, 12), (102, 10)),
    ("Q", (106, 6), (108, 8)),
    ("L", (112, 14)),
    ("Q", (114, 18), (116, 12)),
    ("L", (120, 2)),
    ("Q", (121, 0), (122, 2)),
    ("L", (126, 22)),
    ("Q", (127, 24), (128, 22)),
    ("L", (132, 6)),
    ("Q", (134, 0), (136, 6)),
    ("L", (138, 12)),
    ("Q", (140, 16), (142, 14)),
    ("L", (144, 10)),
    ("Q", (146, 8), (148, 12)),
    ("L", (260, 12)),
)


def flatten_path(path=PULSE_PATH, steps: int = CURVE_STEPS) -> tuple[Point, ...]:
    """Turn move/line/quadratic commands into a single polyline."""
    points: list[Point] = []
    for command, *args in path:
        if command in ("M", "L"):
            points.append(args[0])
        elif command == "Q":
            (x0, y0), (cx, cy), (x1, y1) = points[-1], args[0], args[1]
            for step in range(1, steps + 1):
                t = step / steps
                u = 1 - t
                points.append((
                    u * u * x0 + 2 * u * t * cx + t * t * x1,
                    u * u * y0 + 2 * u * t * cy + t * t * y1,
                ))
        else:
            raise ValueError(f"Unknown path command: {command}")
    return tuple(points)


PULSE_POINTS = flatten_path()


def divider_points(x: float, y: float, width: float) -> list[Point]:
    """The pulse polyline placed at ``(x, y)`` and stretched to ``width``."""
    scale_x = width / CANONICAL_WIDTH
    return [(x + px * scale_x, y + py) for px, py in PULSE_POINTS]


def draw_pulse_divider(surface: ScaledSurface, x: float, y: float, width: float) -> None:
    surface.stroke_path(divider_points(x, y, width), STROKE_WIDTH, STROKE_COLOR)
