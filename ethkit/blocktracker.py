"""Tracking of the chain head with reorg detection and a bounded block history."""

from __future__ import annotations

import enum
import queue
import threading
from dataclasses import dataclass, field
from typing import Callable, Protocol

from .primitives import Block, Hash, Log

LATEST = "latest"
DEFAULT_MAX_BLOCK_BACKLOG = 10
DEFAULT_POLL_INTERVAL = 1.0


class BlockProvider(Protocol):
    """The chain queries the block tracker needs."""

    def get_block_by_hash(self, block_hash: Hash, full: bool) -> Block | None:
        """Return the block with ``block_hash`` or ``None`` when it is unknown."""

    def get_block_by_number(self, number: int | str, full: bool) -> Block | None:
        """Return the block at ``number``, which may be ``"latest"``."""


class _Tracker(Protocol):
    def track(self, stop: threading.Event, handle: Callable[[Block], None]) -> None:
        """Feed new head blocks to ``handle`` until ``stop`` is set."""


class EventType(enum.Enum):
    """Whether an event adds to or removes from the chain."""

    ADD = 0
    DEL = 1


@dataclass
class BlockEvent:
    """Blocks added to and removed from the tracked chain by one update."""

    type: EventType = EventType.ADD
    added: list[Block] = field(default_factory=list)
    removed: list[Block] = field(default_factory=list)


@dataclass
class LogEvent:
    """Logs added to and removed from the chain by one update."""

    type: EventType = EventType.ADD
    added: list[Log] = field(default_factory=list)
    removed: list[Log] = field(default_factory=list)


class BlockTracker:
    """Keeps the most recent blocks of the chain and reports reorgs to subscribers."""

    def __init__(
        self,
        provider: BlockProvider,
        max_block_backlog: int = DEFAULT_MAX_BLOCK_BACKLOG,
        tracker: _Tracker | None = None,
    ) -> None:
        self._provider = provider
        self.max_block_backlog = max_block_backlog
        self._tracker = tracker if tracker is not None else JSONBlockTracker(provider)
        self._blocks: list[Block] = []
        self._lock = threading.Lock()
        self._subscribers: list[queue.Queue[BlockEvent]] = []
        self._subscribers_lock = threading.Lock()
        self._init_lock = threading.Lock()
        self._initialized = False
        self._stop = threading.Event()

    def __len__(self) -> int:
        return len(self._blocks)

    def subscribe(self) -> queue.Queue[BlockEvent]:
        """Return a queue that receives block events; events are dropped while it is full."""
        channel: queue.Queue[BlockEvent] = queue.Queue(maxsize=1)
        with self._subscribers_lock:
            self._subscribers.append(channel)
        return channel

    def acquire_lock(self) -> threading.Lock:
        """Return the lock guarding the block history."""
        return self._lock

    def init(self) -> None:
        """Fill the history with the latest blocks of the chain; only the first call works."""
        with self._init_lock:
            if self._initialized:
                return
            self._initialized = True

            block = self._provider.get_block_by_number(LATEST, False)
            if block is None:
                raise LookupError("latest block not found")
            if block.number == 0:
                return

            collected: list[Block] = []
            for _ in range(self.max_block_backlog):
                collected.append(block)
                if block.number == 0:
                    break
                parent = self._provider.get_block_by_hash(block.parent_hash, False)
                if parent is None:
                    raise LookupError(f"block with hash {block.parent_hash} not found")
                block = parent
            collected.reverse()
            self._blocks = collected

    def last_block(self) -> Block | None:
        """Return a copy of the newest tracked block, or ``None`` when there is none."""
        if not self._blocks:
            return None
        return self._blocks[-1].copy()

    def blocks(self) -> list[Block]:
        """Return copies of the tracked blocks, oldest first."""
        return [block.copy() for block in self._blocks]

    def close(self) -> None:
        """Stop a running :meth:`start`."""
        self._stop.set()

    def start(self) -> None:
        """Follow the chain head until :meth:`close` is called."""
        self._tracker.track(self._stop, self.handle_reconcile)

    def add_block_locked(self, block: Block) -> None:
        """Append ``block`` to the history; the caller holds the lock."""
        if len(self._blocks) == self.max_block_backlog:
            self._blocks.pop(0)
        if self._blocks:
            last_number = self._blocks[-1].number
            if last_number + 1 != block.number:
                raise ValueError(f"bad number sequence. {last_number} and {block.number}")
        self._blocks.append(block)

    def _index_of(self, block_hash: Hash) -> int | None:
        return next(
            (index for index, block in enumerate(self._blocks) if block.hash == block_hash),
            None,
        )

    def _reconcile(self, block: Block) -> tuple[list[Block], int | None]:
        if self._index_of(block.hash) is not None:
            return [], None
        if not self._blocks:
            return [block], None
        if self._blocks[-1].hash == block.parent_hash:
            return [block], None
        fork = self._index_of(block.parent_hash)
        if fork is not None:
            return [block], fork

        # unknown parent: walk back until a known block is found
        added = [block]
        count = 0
        while True:
            if count > self.max_block_backlog:
                raise RuntimeError("cannot reconcile more than max backlog values")
            count += 1
            parent = self._provider.get_block_by_hash(block.parent_hash, False)
            if parent is None:
                raise LookupError(f"parent with hash {block.parent_hash} not found")
            added.append(parent)
            fork = self._index_of(parent.parent_hash)
            if fork is not None:
                break
            block = parent
        added.reverse()
        return added, fork

    def handle_block_event(self, block: Block) -> BlockEvent | None:
        """Merge ``block`` into the history and return what changed, or ``None``."""
        with self._lock:
            blocks, fork = self._reconcile(block)
            if not blocks:
                return None
            event = BlockEvent()
            if fork is not None:
                event.removed.extend(self._blocks[fork + 1:])
                del self._blocks[fork + 1:]
            for item in blocks:
                event.added.append(item)
                self.add_block_locked(item)
            return event

    def handle_reconcile(self, block: Block) -> None:
        """Merge ``block`` into the history and notify subscribers of the change."""
        event = self.handle_block_event(block)
        if event is None:
            return
        with self._subscribers_lock:
            for channel in self._subscribers:
                try:
                    channel.put_nowait(event)
                except queue.Full:
                    pass


class JSONBlockTracker:
    """Finds new head blocks by polling the provider."""

    def __init__(self, provider: BlockProvider, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        self._provider = provider
        self.poll_interval = poll_interval

    def track(self, stop: threading.Event, handle: Callable[[Block], None]) -> None:
        """Poll for the latest block and pass each new one to ``handle`` until ``stop`` is set."""
        last: Block | None = None
        while not stop.wait(self.poll_interval):
            block = self._provider.get_block_by_number(LATEST, False)
            if block is None:
                raise LookupError("latest block not found")
            if last is not None and last.hash == block.hash:
                continue
            handle(block)
            last = block