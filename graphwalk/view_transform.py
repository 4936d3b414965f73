"""
View Transform - camera for the virtual canvas.

Maps between screen pixels and world coordinates under a translate +
uniform-scale camera:

    screen = world * scale + translate
    world  = (screen - translate) / scale

Scale is always clamped to [MIN_SCALE, MAX_SCALE], so the transform is
always invertible.
"""

from typing import Iterable, Tuple

from graphwalk.constants import MIN_SCALE, MAX_SCALE, BUTTON_ZOOM_STEP


def clamp_scale(scale: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, scale))


def display_to_canvas(
    px: float,
    py: float,
    display_width: float,
    display_height: float,
    canvas_width: float,
    canvas_height: float,
) -> Tuple[float, float]:
    """
    Convert a CSS pixel offset on the displayed canvas element into canvas
    (image) pixels. The element may be stretched or shrunk by the layout;
    a zero display size (not laid out yet) leaves the point unscaled.
    """
    sx = canvas_width / display_width if display_width else 1.0
    sy = canvas_height / display_height if display_height else 1.0
    return px * sx, py * sy


class ViewTransform:
    """Pan/zoom state of the canvas."""

    def __init__(self, x: float = 0.0, y: float = 0.0, scale: float = 1.0):
        self.x = float(x)
        self.y = float(y)
        self.scale = clamp_scale(float(scale))

    def __repr__(self):
        return f"ViewTransform(x={self.x:.3f}, y={self.y:.3f}, scale={self.scale:.3f})"

    def screen_to_world(self, sx: float, sy: float) -> Tuple[float, float]:
        return (sx - self.x) / self.scale, (sy - self.y) / self.scale

    def world_to_screen(self, wx: float, wy: float) -> Tuple[float, float]:
        return wx * self.scale + self.x, wy * self.scale + self.y

    def pan_by(self, dx: float, dy: float) -> None:
        """Shift the camera by a screen-space delta."""
        self.x += dx
        self.y += dy

    def zoom_at(self, screen_x: float, screen_y: float, delta: float) -> None:
        """
        Change the scale by `delta` keeping the world point under
        (screen_x, screen_y) fixed on screen.
        """
        world_x, world_y = self.screen_to_world(screen_x, screen_y)
        new_scale = clamp_scale(self.scale + delta)

        self.x = screen_x - world_x * new_scale
        self.y = screen_y - world_y * new_scale
        self.scale = new_scale

    def zoom_center(self, direction: int, width: float, height: float) -> None:
        """Toolbar zoom: step in (+1) or out (-1) around the viewport center."""
        self.zoom_at(width / 2, height / 2, direction * BUTTON_ZOOM_STEP)

    def reset(self) -> None:
        self.x = 0.0
        self.y = 0.0
        self.scale = 1.0

    def reset_to_centroid(self, nodes: Iterable, width: float, height: float) -> None:
        """
        Reset to scale 1 and center the mean node position in the viewport.
        With no nodes the world origin is centered.
        """
        self.reset()
        positions = [(n.x, n.y) for n in nodes]
        avg_x = avg_y = 0.0
        if positions:
            avg_x = sum(p[0] for p in positions) / len(positions)
            avg_y = sum(p[1] for p in positions) / len(positions)
        self.x = width / 2 - avg_x
        self.y = height / 2 - avg_y
