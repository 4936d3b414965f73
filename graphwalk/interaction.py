"""
Interaction Controller - turns pointer and wheel events into graph and camera edits.

This controller manages the editing mode and coordinates between:
- Mouse/wheel events from the UI (in screen pixels)
- The ViewTransform (screen -> world, pan, zoom)
- The GraphStore (hit-testing and mutations)

Structural edits and mode switches are refused while a traversal is running.
Panning and zooming always stay available.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Tuple

from graphwalk.constants import HIT_RADIUS, WHEEL_ZOOM_STEP
from graphwalk.graph_store import GraphStore, Node
from graphwalk.view_transform import ViewTransform

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    PLACE_NODE = "node"
    CONNECT_EDGE = "edge"
    PAN = "pan"
    DELETE = "delete"


INSTRUCTIONS = {
    Mode.PLACE_NODE: "Click anywhere to add a Node",
    Mode.CONNECT_EDGE: "Select two nodes to connect",
    Mode.PAN: "Drag to move • Scroll to zoom",
    Mode.DELETE: "Click a node to delete it",
}

DUPLICATE_EDGE_MESSAGE = "Path already exists!"
EMPTY_LABEL_MESSAGE = "Node name cannot be empty"


class InteractionController:
    """Mode-aware dispatcher for pointer and wheel events."""

    def __init__(self, store: GraphStore, view: ViewTransform, is_busy: Callable[[], bool] = lambda: False):
        self.store = store
        self.view = view
        self._is_busy = is_busy

        self.mode = Mode.PLACE_NODE
        self.pending: Optional[int] = None
        self.pending_coords: Optional[Tuple[float, float]] = None
        self.placement = 0  # bumped for every new pending placement
        self.dragging = False
        self._last_pointer: Tuple[float, float] = (0.0, 0.0)

        self._request_label: Optional[Callable[[float, float], None]] = None
        self._notify: Optional[Callable[[str], None]] = None
        self._on_node_added: Optional[Callable[[int], None]] = None
        self._on_edge_added: Optional[Callable[[int, int], None]] = None
        self._on_node_deleted: Optional[Callable[[int, Node], None]] = None

    def set_callbacks(
        self,
        request_label: Optional[Callable[[float, float], None]] = None,
        notify: Optional[Callable[[str], None]] = None,
        on_node_added: Optional[Callable[[int], None]] = None,
        on_edge_added: Optional[Callable[[int, int], None]] = None,
        on_node_deleted: Optional[Callable[[int, Node], None]] = None,
    ):
        self._request_label = request_label
        self._notify = notify
        self._on_node_added = on_node_added
        self._on_edge_added = on_edge_added
        self._on_node_deleted = on_node_deleted

    @property
    def instructions(self) -> str:
        return INSTRUCTIONS[self.mode]

    def _emit_notice(self, message: str) -> None:
        logger.info(f"Notice: {message}")
        if self._notify:
            self._notify(message)

    # --- Mode ---

    def set_mode(self, mode: Mode) -> bool:
        """Switch mode and drop any pending edge selection. Refused while busy."""
        if self._is_busy():
            return False
        self.mode = Mode(mode)
        self.pending = None
        self.dragging = False
        return True

    # --- Pointer events ---

    def pointer_down(self, sx: float, sy: float, button: int = 0) -> None:
        if button != 0:
            return

        if self.mode is Mode.PAN:
            self.dragging = True
            self._last_pointer = (sx, sy)
            return

        if self._is_busy():
            return

        wx, wy = self.view.screen_to_world(sx, sy)
        hit = self.store.hit_test(wx, wy, HIT_RADIUS)

        if self.mode is Mode.PLACE_NODE:
            if hit is None:
                self.pending_coords = (wx, wy)
                self.placement += 1
                if self._request_label:
                    self._request_label(wx, wy)
        elif self.mode is Mode.CONNECT_EDGE:
            self._select_for_edge(hit)
        elif self.mode is Mode.DELETE:
            if hit is not None:
                self.delete_node(hit)

    def pointer_move(self, sx: float, sy: float) -> None:
        if not self.dragging:
            return
        last_x, last_y = self._last_pointer
        self.view.pan_by(sx - last_x, sy - last_y)
        self._last_pointer = (sx, sy)

    def pointer_up(self) -> None:
        self.dragging = False

    def wheel(self, sx: float, sy: float, delta_y: float) -> None:
        """Scroll up zooms in, scroll down zooms out, anchored at the pointer."""
        direction = 1 if delta_y < 0 else -1
        self.view.zoom_at(sx, sy, direction * WHEEL_ZOOM_STEP)

    # --- Edits ---

    def _select_for_edge(self, hit: Optional[int]) -> None:
        if hit is None or hit == self.pending:
            self.pending = None
            return
        if self.pending is None:
            self.pending = hit
            return

        u, self.pending = self.pending, None
        self.connect(u, hit)

    def connect(self, u: int, v: int) -> bool:
        if self._is_busy():
            return False
        if not self.store.add_edge(u, v):
            self._emit_notice(DUPLICATE_EDGE_MESSAGE)
            return False
        if self._on_edge_added:
            self._on_edge_added(u, v)
        return True

    def confirm_node(self, label: str) -> Optional[int]:
        """
        Finish a node placement with the label entered in the naming dialog.
        Returns the new index, or None when the label is empty or nothing is pending.
        """
        name = (label or "").strip()
        if not name:
            self._emit_notice(EMPTY_LABEL_MESSAGE)
            return None
        if self.pending_coords is None or self._is_busy():
            return None

        wx, wy = self.pending_coords
        self.pending_coords = None
        index = self.store.add_node(wx, wy, name)
        if self._on_node_added:
            self._on_node_added(index)
        return index

    def cancel_node(self, placement: Optional[int] = None) -> None:
        """
        Drop the pending placement. When `placement` is given, only that
        placement is dropped; a cancel arriving for an older one is ignored.
        """
        if placement is not None and placement != self.placement:
            return
        self.pending_coords = None

    def delete_node(self, index: int) -> Optional[Node]:
        if self._is_busy():
            return None
        removed = self.store.delete_node(index)
        self.pending = None
        if self._on_node_deleted:
            self._on_node_deleted(index, removed)
        return removed
