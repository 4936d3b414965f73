"""
Tests for the InteractionController mode handling and hit detection.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from graphwalk.graph_store import GraphStore
from graphwalk.interaction import (
    DUPLICATE_EDGE_MESSAGE,
    EMPTY_LABEL_MESSAGE,
    InteractionController,
    Mode,
)
from graphwalk.view_transform import ViewTransform


class Busy:
    def __init__(self):
        self.value = False

    def __call__(self):
        return self.value


@pytest.fixture
def busy():
    return Busy()


@pytest.fixture
def controller(busy):
    store = GraphStore()
    store.add_node(100, 100, "A")
    store.add_node(300, 100, "B")
    store.add_node(100, 300, "C")
    ctrl = InteractionController(store, ViewTransform(), is_busy=busy)
    ctrl.callbacks = {
        'request_label': MagicMock(),
        'notify': MagicMock(),
        'on_node_added': MagicMock(),
        'on_edge_added': MagicMock(),
        'on_node_deleted': MagicMock(),
    }
    ctrl.set_callbacks(**ctrl.callbacks)
    return ctrl


class TestPlaceNode:

    def test_click_on_empty_space_requests_label(self, controller):
        controller.pointer_down(500, 500)
        controller.callbacks['request_label'].assert_called_once_with(500, 500)
        assert controller.pending_coords == (500, 500)

    def test_click_uses_world_coordinates(self, controller):
        controller.view.pan_by(100, 50)
        controller.view.zoom_at(0, 0, 1.0)
        controller.pointer_down(700, 500)
        wx, wy = controller.view.screen_to_world(700, 500)
        controller.callbacks['request_label'].assert_called_once_with(wx, wy)

    def test_click_on_node_does_nothing(self, controller):
        controller.pointer_down(110, 95)
        controller.callbacks['request_label'].assert_not_called()
        assert controller.pending_coords is None

    def test_confirm_adds_node_with_trimmed_label(self, controller):
        controller.pointer_down(600, 400)
        index = controller.confirm_node("  Lab  ")
        assert index == 3
        assert controller.store.nodes[3].label == "Lab"
        assert (controller.store.nodes[3].x, controller.store.nodes[3].y) == (600, 400)
        controller.callbacks['on_node_added'].assert_called_once_with(3)
        assert controller.pending_coords is None

    def test_empty_label_is_rejected(self, controller):
        controller.pointer_down(600, 400)
        assert controller.confirm_node("   ") is None
        controller.callbacks['notify'].assert_called_once_with(EMPTY_LABEL_MESSAGE)
        assert len(controller.store) == 3
        # placement still pending, the user can fix the name
        assert controller.pending_coords == (600, 400)

    def test_cancel_drops_pending_coordinates(self, controller):
        controller.pointer_down(600, 400)
        controller.cancel_node()
        assert controller.confirm_node("Late") is None
        assert len(controller.store) == 3

    def test_cancel_for_older_placement_is_ignored(self, controller):
        controller.pointer_down(600, 400)
        first = controller.placement
        controller.cancel_node(first)
        controller.pointer_down(700, 500)
        assert controller.placement == first + 1
        # a late cancel from the first dialog must not drop the second placement
        controller.cancel_node(first)
        assert controller.pending_coords == (700, 500)
        assert controller.confirm_node("Lab") == 3

        controller.pointer_down(800, 500)
        controller.cancel_node(controller.placement)
        assert controller.pending_coords is None

    def test_secondary_button_is_ignored(self, controller):
        controller.pointer_down(500, 500, button=2)
        controller.callbacks['request_label'].assert_not_called()


class TestConnectEdge:

    @pytest.fixture(autouse=True)
    def edge_mode(self, controller):
        controller.set_mode(Mode.CONNECT_EDGE)

    def test_two_clicks_create_edge(self, controller):
        controller.pointer_down(100, 100)
        assert controller.pending == 0
        controller.pointer_down(300, 100)
        assert controller.pending is None
        assert controller.store.edge_pairs() == [(0, 1)]
        controller.callbacks['on_edge_added'].assert_called_once_with(0, 1)

    def test_same_node_twice_cancels(self, controller):
        controller.pointer_down(100, 100)
        controller.pointer_down(105, 100)
        assert controller.pending is None
        assert controller.store.edges == []

    def test_empty_click_cancels(self, controller):
        controller.pointer_down(100, 100)
        controller.pointer_down(900, 900)
        assert controller.pending is None
        assert controller.store.edges == []

    def test_duplicate_edge_notifies(self, controller):
        controller.store.add_edge(1, 0)
        controller.pointer_down(100, 100)
        controller.pointer_down(300, 100)
        controller.callbacks['notify'].assert_called_once_with(DUPLICATE_EDGE_MESSAGE)
        assert len(controller.store.edges) == 1
        assert controller.pending is None

    def test_mode_switch_clears_pending(self, controller):
        controller.pointer_down(100, 100)
        assert controller.set_mode(Mode.PAN) is True
        assert controller.pending is None


class TestPanAndZoom:

    def test_drag_pans_by_delta_since_last_move(self, controller):
        controller.set_mode(Mode.PAN)
        controller.pointer_down(10, 10)
        controller.pointer_move(15, 20)
        controller.pointer_move(25, 25)
        controller.pointer_up()
        controller.pointer_move(100, 100)
        assert (controller.view.x, controller.view.y) == (15, 15)

    def test_move_without_drag_does_not_pan(self, controller):
        controller.pointer_move(50, 50)
        assert (controller.view.x, controller.view.y) == (0, 0)

    def test_wheel_zooms_in_any_mode(self, controller, busy):
        controller.set_mode(Mode.DELETE)
        busy.value = True
        controller.wheel(200, 200, -120)
        assert controller.view.scale == pytest.approx(1.1)
        controller.wheel(200, 200, 120)
        controller.wheel(200, 200, 120)
        assert controller.view.scale == pytest.approx(0.9)

    def test_pan_allowed_while_running(self, controller, busy):
        controller.set_mode(Mode.PAN)
        busy.value = True
        controller.pointer_down(0, 0)
        controller.pointer_move(30, 0)
        assert controller.view.x == 30


class TestDelete:

    def test_click_deletes_node(self, controller):
        controller.set_mode(Mode.DELETE)
        controller.store.add_edge(0, 2)
        controller.pointer_down(300, 100)
        assert controller.store.labels() == ["A", "C"]
        assert controller.store.edge_pairs() == [(0, 1)]
        index, node = controller.callbacks['on_node_deleted'].call_args[0]
        assert index == 1 and node.label == "B"

    def test_click_on_empty_space_keeps_graph(self, controller):
        controller.set_mode(Mode.DELETE)
        controller.pointer_down(800, 800)
        assert len(controller.store) == 3


class TestWhileRunning:

    def test_mode_switch_refused(self, controller, busy):
        busy.value = True
        assert controller.set_mode(Mode.DELETE) is False
        assert controller.mode is Mode.PLACE_NODE

    def test_structural_edits_ignored(self, controller, busy):
        controller.set_mode(Mode.DELETE)
        busy.value = True
        controller.pointer_down(100, 100)
        assert len(controller.store) == 3
        assert controller.connect(0, 1) is False
        assert controller.store.edges == []


def test_instructions_follow_mode(controller):
    assert controller.instructions == "Click anywhere to add a Node"
    controller.set_mode(Mode.CONNECT_EDGE)
    assert controller.instructions == "Select two nodes to connect"
