"""Tests for the worker-side render link."""

import queue

from worldgen.render.frames import string_to_frame
from worldgen.render.link import RenderLink
from worldgen.render.packets import (
    GUI,
    Key,
    LoopClosed,
    NewFrame,
    RegisteredGUI,
    RegisteredGUIs,
    RegisterGUI,
    RegisterGUIs,
)


class TestSend:
    """Tests for sending packets."""

    def test_send_queues_packet(self, channels) -> None:
        """Packets land on the display queue in order."""
        packets, ticks = channels
        link = RenderLink(packets, ticks)
        first = NewFrame(string_to_frame("a"))
        second = NewFrame(string_to_frame("b"))

        assert link.send(first)
        assert link.send(second)
        assert packets.get_nowait() is first
        assert packets.get_nowait() is second

    def test_closed_display_drops(self, channels) -> None:
        """After LoopClosed, packets are dropped silently."""
        packets, ticks = channels
        link = RenderLink(packets, ticks)
        ticks.put(LoopClosed())

        link.poll()

        assert link.closed
        assert not link.send(NewFrame(string_to_frame("late")))
        assert packets.empty()

    def test_full_queue_drops(self) -> None:
        """A full display queue drops the packet instead of blocking."""
        packets: queue.Queue = queue.Queue(maxsize=1)
        link = RenderLink(packets, queue.Queue())
        assert link.send(NewFrame(string_to_frame("a")))
        assert not link.send(NewFrame(string_to_frame("b")))


class TestPoll:
    """Tests for draining ticks."""

    def test_poll_collects_keys(self, channels) -> None:
        """Key presses are returned and remembered."""
        packets, ticks = channels
        link = RenderLink(packets, ticks)
        ticks.put(Key("q"))
        ticks.put(Key("r"))

        drained = link.poll()

        assert drained == [Key("q"), Key("r")]
        assert link.keys == ["q", "r"]
        assert not link.closed

    def test_poll_empty(self, channels) -> None:
        """Polling an empty queue returns immediately."""
        link = RenderLink(*channels)
        assert link.poll() == []


class TestRegistration:
    """Tests for GUI registration."""

    def test_register_gui_ack(self, channels) -> None:
        """The id from a matching acknowledgement is returned."""
        packets, ticks = channels
        link = RenderLink(packets, ticks, registration_timeout_s=1.0)
        ticks.put(RegisteredGUI(priority=2, gui_id=7))

        gui = GUI(offset=(0, 1), frame=string_to_frame("title"))
        assert link.register_gui(2, gui) == 7
        assert packets.get_nowait() == RegisterGUI(2, gui)

    def test_register_guis_ack(self, channels) -> None:
        """Batch registration returns ids in request order."""
        packets, ticks = channels
        link = RenderLink(packets, ticks, registration_timeout_s=1.0)
        ticks.put(RegisteredGUIs(priority=0, gui_ids=(3, 4)))

        ids = link.register_guis(0, [GUI(offset=(0, 1)), GUI(offset=(0, -1))])

        assert ids == (3, 4)
        assert isinstance(packets.get_nowait(), RegisterGUIs)

    def test_other_priority_ignored(self, channels) -> None:
        """Acknowledgements for another priority do not satisfy the wait."""
        packets, ticks = channels
        link = RenderLink(packets, ticks, registration_timeout_s=0.1)
        ticks.put(RegisteredGUI(priority=1, gui_id=0))

        assert link.register_gui(0, None) is None

    def test_timeout_returns_none(self, channels) -> None:
        """No acknowledgement within the timeout is not fatal."""
        link = RenderLink(*channels, registration_timeout_s=0.05)
        assert link.register_gui(0, None) is None
        assert not link.closed

    def test_closed_while_waiting(self, channels) -> None:
        """A display that exits during the wait ends it early."""
        packets, ticks = channels
        link = RenderLink(packets, ticks, registration_timeout_s=5.0)
        ticks.put(LoopClosed())

        assert link.register_guis(0, [None]) is None
        assert link.closed

    def test_register_after_close(self, channels) -> None:
        """Registration on a closed link sends nothing."""
        packets, ticks = channels
        link = RenderLink(packets, ticks)
        ticks.put(LoopClosed())
        link.poll()

        assert link.register_gui(0, None) is None
        assert packets.empty()
