"""Worker/display message protocol, frame builders and endpoints."""

from .display import HeadlessDisplay
from .frames import string_to_frame, world_to_frame
from .link import RenderLink
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
    Tile,
    UpdateGUI,
)

__all__ = [
    "ChangeSize",
    "Frame",
    "GUI",
    "HeadlessDisplay",
    "Key",
    "LoopClosed",
    "NewFrame",
    "RegisterGUI",
    "RegisterGUIs",
    "RegisteredGUI",
    "RegisteredGUIs",
    "RenderLink",
    "RenderPacket",
    "RenderTick",
    "Tile",
    "UpdateGUI",
    "string_to_frame",
    "world_to_frame",
]
