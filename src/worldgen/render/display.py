"""Headless display: the display side of the channels without a terminal.

It applies packets the way an interactive renderer would (current frame,
size, overlays) and acknowledges registrations, so the worker can run
against it from the CLI and in tests.
"""

import queue
from typing import Callable

import structlog

from ..grid import Dimensions
from .packets import (
    GUI,
    ChangeSize,
    Frame,
    Key,
    LoopClosed,
    NewFrame,
    RegisteredGUI,
    RegisteredGUIs,
    RegisterGUI,
    RegisterGUIs,
    RenderPacket,
    RenderTick,
    UpdateGUI,
)

logger = structlog.get_logger()


class HeadlessDisplay:
    """Consumes render packets and answers with render ticks."""

    def __init__(
        self,
        packets: "queue.Queue[RenderPacket]",
        ticks: "queue.Queue[RenderTick]",
        dimensions: Dimensions,
    ):
        self._packets = packets
        self._ticks = ticks
        self.dimensions = dimensions
        self.current_frame: Frame | None = None
        self.frames_received = 0
        # (priority, overlay); the list position is the overlay id
        self.guis: list[tuple[int, GUI | None]] = []
        self.closed = False

    def handle(self, packet: RenderPacket) -> None:
        """Apply a single packet."""
        if isinstance(packet, NewFrame):
            self.current_frame = packet.frame
            self.frames_received += 1
        elif isinstance(packet, ChangeSize):
            logger.debug("display_resized", size=str(packet.dimensions))
            self.dimensions = packet.dimensions
        elif isinstance(packet, RegisterGUI):
            gui_id = self._register(packet.priority, packet.gui)
            self._ticks.put(RegisteredGUI(packet.priority, gui_id))
        elif isinstance(packet, RegisterGUIs):
            ids = tuple(self._register(packet.priority, gui) for gui in packet.guis)
            self._ticks.put(RegisteredGUIs(packet.priority, ids))
        elif isinstance(packet, UpdateGUI):
            self._update(packet.gui_id, packet.frame)
        else:
            raise TypeError(f"Unknown render packet: {packet!r}")

    def pump(self, timeout: float | None = None) -> bool:
        """Handle the next packet, waiting up to ``timeout`` seconds.

        Returns:
            True if a packet was handled.
        """
        try:
            packet = self._packets.get(timeout=timeout)
        except queue.Empty:
            return False
        self.handle(packet)
        return True

    def run_until(self, done: Callable[[], bool], poll_interval: float = 0.05) -> None:
        """Handle packets until ``done()`` is true and the queue is drained."""
        while True:
            if self.pump(timeout=poll_interval):
                continue
            if done():
                # Drain anything sent just before completion
                while self.pump(timeout=0):
                    pass
                return

    def press(self, keycode: str) -> None:
        """Forward a key press; dropped if the worker's queue is full."""
        try:
            self._ticks.put_nowait(Key(keycode))
        except queue.Full:
            logger.debug("key_dropped", keycode=keycode)

    def close(self) -> None:
        """Tell the worker the display loop has exited."""
        if not self.closed:
            self.closed = True
            self._ticks.put(LoopClosed())

    def overlay(self, gui_id: int) -> GUI | None:
        return self.guis[gui_id][1]

    def _register(self, priority: int, gui: GUI | None) -> int:
        gui_id = len(self.guis)
        self.guis.append((priority, gui))
        return gui_id

    def _update(self, gui_id: int, frame: Frame) -> None:
        if not 0 <= gui_id < len(self.guis):
            logger.warning("gui_update_unknown_id", gui_id=gui_id)
            return
        priority, gui = self.guis[gui_id]
        offset = gui.offset if gui is not None else (0, 0)
        self.guis[gui_id] = (priority, GUI(offset=offset, frame=frame))
