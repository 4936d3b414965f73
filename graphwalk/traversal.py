"""
Traversal Engine - BFS/DFS playback as a cooperative, time-stepped task.

The algorithms are written as step generators. Each step is either a MARK
(assign a visual state to one node) or a WAIT (a suspension point with a
delay). TraversalStepper applies MARK steps to the graph one at a time, and
TraversalEngine drives a stepper either with real delays on the event loop
(`run`) or in a tight loop with no delay at all (`run_instant`).

Only one run may be active at a time. A run cannot be cancelled from the UI
once started; the running flag is always cleared when the driver exits.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, Iterator, List, Optional

from graphwalk.graph_store import GraphStore, VisualState

logger = logging.getLogger(__name__)


class Algorithm(str, Enum):
    BFS = "BFS"
    DFS = "DFS"


class StepKind(str, Enum):
    MARK = "mark"
    WAIT = "wait"


@dataclass(frozen=True)
class Step:
    kind: StepKind
    node: Optional[int] = None
    state: Optional[VisualState] = None
    delay: float = 0.0

    @classmethod
    def mark(cls, node: int, state: VisualState) -> 'Step':
        return cls(StepKind.MARK, node=node, state=state)

    @classmethod
    def wait(cls, delay: float) -> 'Step':
        return cls(StepKind.WAIT, delay=delay)


@dataclass
class Delays:
    """Playback delays in seconds."""
    bfs_visit: float = 0.5
    bfs_fanout: float = 0.3
    dfs_visit: float = 0.6


class StartResult(str, Enum):
    STARTED = "started"
    BUSY = "busy"
    NO_START = "no_start"
    INVALID_START = "invalid_start"


START_MESSAGES = {
    StartResult.BUSY: "Already running!",
    StartResult.NO_START: "Select a start node!",
    StartResult.INVALID_START: "Start node no longer exists!",
}


def bfs_steps(store: GraphStore, start: int, delays: Delays) -> Iterator[Step]:
    queue = deque([start])
    discovered = {start}
    yield Step.mark(start, VisualState.VISITING)

    while queue:
        u = queue.popleft()
        yield Step.wait(delays.bfs_visit)
        yield Step.mark(u, VisualState.VISITED)

        for v in store.neighbors_of(u):
            if v in discovered:
                continue
            discovered.add(v)
            queue.append(v)
            yield Step.mark(v, VisualState.VISITING)
            yield Step.wait(delays.bfs_fanout)


def dfs_steps(store: GraphStore, start: int, delays: Delays) -> Iterator[Step]:
    """
    Pre-order depth-first walk using an explicit stack of
    (node, neighbor cursor) pairs instead of recursion. A neighbor is checked
    against the discovered set when the cursor reaches it, which matches the
    recursive formulation exactly.
    """
    def enter(u):
        discovered.add(u)
        yield Step.mark(u, VisualState.VISITING)
        yield Step.wait(delays.dfs_visit)
        yield Step.mark(u, VisualState.VISITED)
        stack.append((u, iter(store.neighbors_of(u))))

    discovered = set()
    stack = []
    yield from enter(start)

    while stack:
        _, cursor = stack[-1]
        v = next(cursor, None)
        if v is None:
            stack.pop()
        elif v not in discovered:
            yield from enter(v)


STEP_GENERATORS: Dict[Algorithm, Callable[[GraphStore, int, Delays], Iterator[Step]]] = {
    Algorithm.BFS: bfs_steps,
    Algorithm.DFS: dfs_steps,
}


class TraversalStepper:
    """
    Advances a traversal one step at a time and applies MARK steps to the
    nodes of the store. Independent of wall-clock time.
    """

    def __init__(self, store: GraphStore, start: int, algorithm: Algorithm, delays: Optional[Delays] = None):
        self.store = store
        self.start = start
        self.algorithm = Algorithm(algorithm)
        self.visit_order: List[int] = []
        self.done = False
        self._steps = STEP_GENERATORS[self.algorithm](store, start, delays or Delays())

    @property
    def states(self) -> List[VisualState]:
        return [n.state for n in self.store.nodes]

    def advance(self) -> Optional[Step]:
        """Perform the next step and return it, or None once finished."""
        if self.done:
            return None
        step = next(self._steps, None)
        if step is None:
            self.done = True
            return None

        if step.kind is StepKind.MARK:
            self.store.nodes[step.node].state = step.state
            if step.state is VisualState.VISITED:
                self.visit_order.append(step.node)
        return step


class TraversalEngine:
    """
    Single-flight traversal driver: Idle -> Running -> Idle.

    Usage:
        engine = TraversalEngine(store)
        await engine.run(0, Algorithm.BFS)        # animated
        engine.run_instant(0, Algorithm.DFS)      # no delays
    """

    def __init__(
        self,
        store: GraphStore,
        delays: Optional[Delays] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_started: Optional[Callable[[Algorithm], None]] = None,
        on_finished: Optional[Callable[[Algorithm, List[int]], None]] = None,
    ):
        self.store = store
        self.delays = delays or Delays()
        self.running = False
        self.algorithm: Optional[Algorithm] = None
        self._sleep = sleep
        self._stepper: Optional[TraversalStepper] = None
        self._on_started = on_started
        self._on_finished = on_finished

    @property
    def states(self) -> List[VisualState]:
        return [n.state for n in self.store.nodes]

    def start(self, start: Optional[int], algorithm: Algorithm) -> StartResult:
        """
        Validate the request and enter the Running state. Every node is reset
        to DEFAULT before the first step.
        """
        if self.running:
            return StartResult.BUSY
        if start is None:
            return StartResult.NO_START
        if not 0 <= start < len(self.store):
            return StartResult.INVALID_START

        algorithm = Algorithm(algorithm)
        self.store.reset_states()
        self.algorithm = algorithm
        self.running = True
        self._stepper = TraversalStepper(self.store, start, algorithm, self.delays)

        logger.info(f"{algorithm.value} started from node {start}")
        if self._on_started:
            self._on_started(algorithm)
        return StartResult.STARTED

    def _finish(self) -> None:
        algorithm = self.algorithm
        visited = self._stepper.visit_order if self._stepper else []
        self.running = False
        self.algorithm = None
        self._stepper = None

        logger.info(f"{algorithm.value} finished, {len(visited)} node(s) visited")
        if self._on_finished:
            self._on_finished(algorithm, visited)

    async def run(self, start: Optional[int], algorithm: Algorithm) -> StartResult:
        """Play a traversal back, suspending on the event loop at each WAIT."""
        result = self.start(start, algorithm)
        if result is not StartResult.STARTED:
            return result

        try:
            while True:
                step = self._stepper.advance()
                if step is None:
                    break
                if step.kind is StepKind.WAIT and step.delay > 0:
                    await self._sleep(step.delay)
        finally:
            self._finish()
        return result

    def run_instant(self, start: Optional[int], algorithm: Algorithm) -> StartResult:
        """Compute the whole traversal synchronously, ignoring delays."""
        result = self.start(start, algorithm)
        if result is not StartResult.STARTED:
            return result

        try:
            while self._stepper.advance() is not None:
                pass
        finally:
            self._finish()
        return result
