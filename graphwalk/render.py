"""
Render Loop - draws the canvas as SVG markup.

A frame is a pure function of (GraphStore, ViewTransform, pending selection,
time accumulator); the viewport size only matters to the SVG host element. The RenderLoop only owns the time
accumulator that drives the pulsing glow of VISITING nodes; it is ticked by a
periodic timer whether or not a traversal is running.

Drawing order:
- background dot grid, fixed in world space (moves with pan and zoom)
- camera transform group
- edges as straight lines
- nodes as circles styled by visual state, with centered labels

Line widths and font size are divided by the zoom scale so they stay constant
on screen, with a floor of one pixel.
"""

import math
from dataclasses import dataclass
from html import escape
from typing import Callable, List, Optional, Tuple

from graphwalk.constants import GRID_STEP, LABEL_MAX_CHARS, NODE_RADIUS, TIME_RATE
from graphwalk.graph_store import GraphStore, VisualState
from graphwalk.utils import fmt, hex_to_rgba, truncate_label
from graphwalk.view_transform import ViewTransform


# Palette
_NODE_FILL = '#1e293b'
_NODE_STROKE = '#cbd5e1'
_SELECTED_COLOR = '#6366f1'
_VISITING_STROKE = '#fbbf24'
_VISITING_FILL = '#78350f'
_VISITED_STROKE = '#34d399'
_VISITED_FILL = '#064e3b'
_LABEL_COLOR = '#f1f5f9'
_EDGE_COLOR = hex_to_rgba('#94a3b8', 0.4)
_GRID_COLOR = hex_to_rgba('#6366f1', 0.15)


@dataclass(frozen=True)
class NodeStyle:
    fill: str
    stroke: str
    glow_color: Optional[str]
    glow_blur: float
    line_width: float


def screen_width(base: float, scale: float) -> float:
    """World-space width that renders as `base` pixels, never below one."""
    return max(base / scale, 1.0)


def font_size(scale: float) -> float:
    return 12 / scale + 4


def pulse(time: float) -> float:
    return 20 + math.sin(time * 5) * 5


def node_style(state: VisualState, selected: bool, time: float, scale: float) -> NodeStyle:
    """Colors, glow and stroke width of a node for one frame."""
    emphasized = selected or state is not VisualState.DEFAULT
    line_width = screen_width(3 if emphasized else 2, scale)

    if state is VisualState.VISITED:
        return NodeStyle(_VISITED_FILL, _VISITED_STROKE, _VISITED_STROKE, 15, line_width)
    if state is VisualState.VISITING:
        return NodeStyle(_VISITING_FILL, _VISITING_STROKE, _VISITING_STROKE, pulse(time), line_width)
    if selected:
        return NodeStyle(_NODE_FILL, _SELECTED_COLOR, _SELECTED_COLOR, 20, line_width)
    return NodeStyle(_NODE_FILL, _NODE_STROKE, None, 0, line_width)


def grid_origin(view: ViewTransform) -> Tuple[float, float, float]:
    """Screen offset of the first grid dot and the dot spacing."""
    step = GRID_STEP * view.scale
    return view.x % step, view.y % step, step


def _grid_svg(view: ViewTransform) -> str:
    offset_x, offset_y, step = grid_origin(view)
    half = step / 2
    # dots sit in the middle of each pattern tile, so shift the tile by half a step
    return (
        f'<defs><pattern id="grid" patternUnits="userSpaceOnUse" '
        f'x="{fmt(offset_x - half)}" y="{fmt(offset_y - half)}" width="{fmt(step)}" height="{fmt(step)}">'
        f'<circle cx="{fmt(half)}" cy="{fmt(half)}" r="{fmt(view.scale)}" fill="{_GRID_COLOR}"/>'
        f'</pattern></defs>'
        f'<rect x="0" y="0" width="100%" height="100%" fill="url(#grid)"/>'
    )


def _edges_svg(store: GraphStore, scale: float) -> List[str]:
    width = fmt(screen_width(2, scale))
    parts = []
    for u, v in store.edge_pairs():
        a, b = store.nodes[u], store.nodes[v]
        parts.append(
            f'<line x1="{fmt(a.x)}" y1="{fmt(a.y)}" x2="{fmt(b.x)}" y2="{fmt(b.y)}" '
            f'stroke="{_EDGE_COLOR}" stroke-width="{width}"/>'
        )
    return parts


def _nodes_svg(store: GraphStore, scale: float, selected: Optional[int], time: float) -> List[str]:
    size = fmt(font_size(scale))
    parts = []
    for i, n in enumerate(store.nodes):
        style = node_style(n.state, selected == i, time, scale)
        glow = ''
        if style.glow_color and style.glow_blur > 0:
            glow = f' style="filter: drop-shadow(0 0 {fmt(style.glow_blur)}px {style.glow_color})"'
        parts.append(
            f'<circle cx="{fmt(n.x)}" cy="{fmt(n.y)}" r="{NODE_RADIUS}" fill="{style.fill}" '
            f'stroke="{style.stroke}" stroke-width="{fmt(style.line_width)}"{glow}/>'
        )
        parts.append(
            f'<text x="{fmt(n.x)}" y="{fmt(n.y)}" fill="{_LABEL_COLOR}" font-size="{size}" '
            f'font-weight="600" font-family="Inter, sans-serif" text-anchor="middle" '
            f'dominant-baseline="central">{escape(truncate_label(n.label, LABEL_MAX_CHARS))}</text>'
        )
    return parts


def render_frame(
    store: GraphStore,
    view: ViewTransform,
    selected: Optional[int] = None,
    time: float = 0.0,
) -> str:
    """
    Render one frame as SVG content for the canvas overlay.

    Args:
        store: Graph to draw
        view: Current camera
        selected: Pending edge-selection node, highlighted when in DEFAULT state
        time: Time accumulator driving the VISITING pulse

    Returns:
        SVG markup (without the outer <svg> element)
    """
    s = view.scale
    parts = [_grid_svg(view)]
    parts.append(f'<g transform="matrix({fmt(s, 4)} 0 0 {fmt(s, 4)} {fmt(view.x)} {fmt(view.y)})">')
    parts.extend(_edges_svg(store, s))
    parts.extend(_nodes_svg(store, s, selected, time))
    parts.append('</g>')
    return ''.join(parts)


class RenderLoop:
    """
    Samples the current state at a fixed cadence. `tick` is called by a
    periodic UI timer and returns the markup for the new frame.
    """

    def __init__(self, store: GraphStore, view: ViewTransform, selected: Callable[[], Optional[int]] = lambda: None):
        self.store = store
        self.view = view
        self.time = 0.0
        self.frames = 0
        self._selected = selected

    def tick(self, dt: float) -> str:
        self.time += dt * TIME_RATE
        self.frames += 1
        return self.frame()

    def frame(self) -> str:
        return render_frame(self.store, self.view, self._selected(), self.time)
