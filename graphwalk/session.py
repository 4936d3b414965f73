"""
Graph Session - the single owner of one editor's state.

Constructed once per page. Wires the GraphStore, ViewTransform,
TraversalEngine, InteractionController and RenderLoop together and owns the
pieces of state that belong to the page rather than to any one component:

- the append-only activity log (what the log panel shows)
- transient notifications (what the toast shows)
- the start-node selection for traversals
- the counter behind the default "Node N" name
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional

from graphwalk.graph_store import GraphStore, Node
from graphwalk.interaction import InteractionController, Mode
from graphwalk.render import RenderLoop
from graphwalk.traversal import Algorithm, Delays, START_MESSAGES, StartResult, TraversalEngine
from graphwalk.utils import count_label
from graphwalk.view_transform import ViewTransform, display_to_canvas

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "Wait for the traversal to finish"

# (label, dx, dy) around the viewport center, then edges by index
DEMO_NODES = [
    ("Library", 0, -150),
    ("Hostel", -150, 0),
    ("Cafeteria", 150, 0),
    ("Gym", 0, 150),
    ("Admin", 0, 0),
]
DEMO_EDGES = [(0, 4), (1, 4), (2, 4), (3, 4), (0, 2)]


class GraphSession:
    """
    Explicitly owned editor session.

    Usage:
        session = GraphSession(width=1280, height=720)
        session.set_listeners(on_log=print, on_notify=print)
        session.seed_demo()
        session.select_start(0)
        await session.run_traversal(Algorithm.BFS)
    """

    def __init__(
        self,
        width: int = 1280,
        height: int = 720,
        delays: Optional[Delays] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.width = width
        self.height = height

        self.store = GraphStore()
        self.view = ViewTransform()
        self.engine = TraversalEngine(
            self.store,
            delays=delays,
            sleep=sleep,
            on_started=self._traversal_started,
            on_finished=self._traversal_finished,
        )
        self.controller = InteractionController(self.store, self.view, is_busy=lambda: self.engine.running)
        self.controller.set_callbacks(
            request_label=self._request_label,
            notify=self.notify,
            on_node_added=self._node_added,
            on_edge_added=self._edge_added,
            on_node_deleted=self._node_deleted,
        )
        self.render_loop = RenderLoop(self.store, self.view, selected=lambda: self.controller.pending)

        self.log_entries: List[str] = []
        self.start_node: Optional[int] = None
        self.node_counter = 1

        self._on_log: Optional[Callable[[str], None]] = None
        self._on_notify: Optional[Callable[[str], None]] = None
        self._on_nodes_changed: Optional[Callable[[], None]] = None
        self._on_label_request: Optional[Callable[[str], None]] = None

    def set_listeners(
        self,
        on_log: Optional[Callable[[str], None]] = None,
        on_notify: Optional[Callable[[str], None]] = None,
        on_nodes_changed: Optional[Callable[[], None]] = None,
        on_label_request: Optional[Callable[[str], None]] = None,
    ):
        """Attach the UI surfaces. on_label_request receives the default name."""
        self._on_log = on_log
        self._on_notify = on_notify
        self._on_nodes_changed = on_nodes_changed
        self._on_label_request = on_label_request

    @property
    def running(self) -> bool:
        return self.engine.running

    # --- Surfaces ---

    def log(self, message: str) -> None:
        self.log_entries.append(message)
        logger.info(message)
        if self._on_log:
            self._on_log(message)

    def notify(self, message: str) -> None:
        if self._on_notify:
            self._on_notify(message)

    # --- Node naming ---

    def next_default_label(self) -> str:
        return f"Node {self.node_counter}"

    def _request_label(self, wx: float, wy: float) -> None:
        if self._on_label_request:
            self._on_label_request(self.next_default_label())

    def confirm_node(self, label: str) -> Optional[int]:
        index = self.controller.confirm_node(label)
        if index is not None:
            self.node_counter += 1
        return index

    def cancel_node(self, placement: Optional[int] = None) -> None:
        self.controller.cancel_node(placement)

    # --- Graph change hooks ---

    def _node_added(self, index: int) -> None:
        self.log(f"Created: {self.store.nodes[index].label}")
        self._refresh_selection()

    def _edge_added(self, u: int, v: int) -> None:
        self.log(f"Linked: {self.store.nodes[u].label} ↔ {self.store.nodes[v].label}")

    def _node_deleted(self, index: int, node: Node) -> None:
        self.log(f"Deleted: {node.label}")
        self._refresh_selection()

    def add_node(self, x: float, y: float, label: str) -> int:
        """Programmatic node creation (demo seeding), bypassing the dialog."""
        index = self.store.add_node(x, y, label)
        self._node_added(index)
        return index

    def add_edge(self, u: int, v: int) -> bool:
        return self.controller.connect(u, v)

    # --- Start-node selection ---

    def selection_options(self) -> Dict[int, str]:
        return {i: label for i, label in enumerate(self.store.labels())}

    def select_start(self, index: Optional[int]) -> None:
        self.start_node = index

    def _refresh_selection(self) -> None:
        if self.start_node is not None and not 0 <= self.start_node < len(self.store):
            self.start_node = None
        if self._on_nodes_changed:
            self._on_nodes_changed()

    # --- Modes and camera ---

    def set_mode(self, mode: Mode) -> bool:
        if not self.controller.set_mode(mode):
            self.notify(BUSY_MESSAGE)
            return False
        return True

    def wheel(
        self,
        offset_x: float,
        offset_y: float,
        delta_y: float,
        display_width: float = 0,
        display_height: float = 0,
    ) -> None:
        """Wheel zoom from a browser event measured on the displayed element."""
        sx, sy = display_to_canvas(
            offset_x, offset_y, display_width, display_height, self.width, self.height
        )
        self.controller.wheel(sx, sy, delta_y)

    def zoom(self, direction: int) -> None:
        self.view.zoom_center(direction, self.width, self.height)

    def reset_view(self) -> None:
        self.view.reset_to_centroid(self.store.nodes, self.width, self.height)

    # --- Whole-map operations ---

    def seed_demo(self) -> None:
        """Load the five-node demo map around the viewport center."""
        self.view.reset()
        cx, cy = self.width / 2, self.height / 2
        for label, dx, dy in DEMO_NODES:
            self.add_node(cx + dx, cy + dy, label)
        for u, v in DEMO_EDGES:
            self.add_edge(u, v)
        self.reset_view()
        self.log("Demo map loaded.")

    def reset_colors(self) -> bool:
        if self.running:
            self.notify(BUSY_MESSAGE)
            return False
        self.store.reset_states()
        self.log("Colors reset.")
        return True

    def clear_map(self) -> bool:
        if self.running:
            self.notify(BUSY_MESSAGE)
            return False
        self.store.clear()
        self.controller.pending = None
        self.controller.cancel_node()
        self.node_counter = 1
        self.view.reset()
        self._refresh_selection()
        self.log("Map Cleared.")
        return True

    # --- Traversal ---

    def _traversal_started(self, algorithm: Algorithm) -> None:
        self.log(f"Running {algorithm.value}...")

    def _traversal_finished(self, algorithm: Algorithm, visited: List[int]) -> None:
        self.log("Done.")

    async def run_traversal(self, algorithm: Algorithm) -> StartResult:
        """Animate a traversal from the selected start node."""
        result = await self.engine.run(self.start_node, algorithm)
        if result is not StartResult.STARTED:
            self.notify(START_MESSAGES[result])
        return result

    def run_traversal_instant(self, algorithm: Algorithm) -> StartResult:
        result = self.engine.run_instant(self.start_node, algorithm)
        if result is not StartResult.STARTED:
            self.notify(START_MESSAGES[result])
        return result

    def status_text(self) -> str:
        return " · ".join([
            count_label(len(self.store), "node"),
            count_label(len(self.store.edges), "edge"),
            count_label(self.store.component_count(), "component"),
        ])
