"""Worker-side endpoint of the worker/display channels."""

import queue
import time

import structlog

from .packets import (
    GUI,
    Key,
    LoopClosed,
    RegisteredGUI,
    RegisteredGUIs,
    RegisterGUI,
    RegisterGUIs,
    RenderPacket,
    RenderTick,
)

logger = structlog.get_logger()

DEFAULT_REGISTRATION_TIMEOUT_S = 3.0


class RenderLink:
    """
    Sends render packets to the display and reads its ticks.

    The link never blocks the worker indefinitely: registration waits are
    bounded, and once the display reports ``LoopClosed`` further packets are
    dropped so generation can finish silently.
    """

    def __init__(
        self,
        packets: "queue.Queue[RenderPacket]",
        ticks: "queue.Queue[RenderTick]",
        registration_timeout_s: float = DEFAULT_REGISTRATION_TIMEOUT_S,
    ):
        self._packets = packets
        self._ticks = ticks
        self.registration_timeout_s = registration_timeout_s
        self._closed = False
        self.keys: list[str] = []

    @property
    def closed(self) -> bool:
        """Whether the display has exited."""
        return self._closed

    def send(self, packet: RenderPacket) -> bool:
        """Queue a packet for the display.

        Returns:
            True if queued, False if dropped because the display is gone or
            its queue is full.
        """
        if self._closed:
            logger.debug("packet_dropped_display_closed", packet=type(packet).__name__)
            return False
        try:
            self._packets.put_nowait(packet)
        except queue.Full:
            logger.warning("packet_dropped_queue_full", packet=type(packet).__name__)
            return False
        return True

    def poll(self) -> list[RenderTick]:
        """Drain pending ticks without blocking."""
        drained: list[RenderTick] = []
        while True:
            try:
                tick = self._ticks.get_nowait()
            except queue.Empty:
                return drained
            self._observe(tick)
            drained.append(tick)

    def register_gui(self, priority: int, gui: GUI | None) -> int | None:
        """Register one overlay and wait for its id.

        Returns:
            The overlay id, or None on timeout or closed display.
        """
        if not self.send(RegisterGUI(priority, gui)):
            return None
        ack = self._await_ack(RegisteredGUI, priority)
        return ack.gui_id if ack is not None else None

    def register_guis(
        self,
        priority: int,
        guis: list[GUI | None],
    ) -> tuple[int, ...] | None:
        """Register several overlays and wait for their ids.

        Returns:
            The overlay ids in request order, or None on timeout or closed
            display.
        """
        if not self.send(RegisterGUIs(priority, tuple(guis))):
            return None
        ack = self._await_ack(RegisteredGUIs, priority)
        return ack.gui_ids if ack is not None else None

    def _await_ack(self, kind: type, priority: int):
        deadline = time.monotonic() + self.registration_timeout_s

        while not self._closed:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning(
                    "gui_registration_timeout",
                    ack=kind.__name__,
                    priority=priority,
                    timeout_s=self.registration_timeout_s,
                )
                return None
            try:
                tick = self._ticks.get(timeout=remaining)
            except queue.Empty:
                continue

            self._observe(tick)
            if isinstance(tick, kind) and tick.priority == priority:
                return tick
            if isinstance(tick, (RegisteredGUI, RegisteredGUIs)):
                logger.debug("unexpected_gui_ack", ack=type(tick).__name__)

        return None

    def _observe(self, tick: RenderTick) -> None:
        if isinstance(tick, LoopClosed):
            if not self._closed:
                logger.info("display_closed")
            self._closed = True
        elif isinstance(tick, Key):
            logger.debug("key_received", keycode=tick.keycode)
            self.keys.append(tick.keycode)
