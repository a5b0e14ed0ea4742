"""Messages exchanged between the generation worker and the display.

All messages are immutable: frames hold tuples of tiles, so a frame sent to
the display is a snapshot the worker can no longer change.
"""

from dataclasses import dataclass

from ..grid import Dimensions

RGBA = tuple[float, float, float, float]

WHITE: RGBA = (1.0, 1.0, 1.0, 1.0)
BLACK: RGBA = (0.0, 0.0, 0.0, 1.0)

# Frames wider than this wrap onto further rows
MAX_FRAME_WIDTH = 100


@dataclass(frozen=True)
class Tile:
    """A single character cell with foreground and background colours."""

    char: str
    fg: RGBA = WHITE
    bg: RGBA = BLACK


@dataclass(frozen=True)
class Frame:
    """Information necessary to render a single frame, row-major."""

    dimensions: Dimensions
    tiles: tuple[Tile, ...]

    def tile_at(self, x: int, y: int) -> Tile:
        return self.tiles[self.dimensions.point_to_index(x, y)]

    def text(self) -> str:
        """Characters of the frame, one line per row."""
        width = self.dimensions.width
        return "\n".join(
            "".join(tile.char for tile in self.tiles[row : row + width])
            for row in range(0, len(self.tiles), width)
        )


@dataclass(frozen=True)
class GUI:
    """An overlay drawn relative to the main frame.

    Negative x offsets count from the right edge, negative y from the bottom.
    """

    offset: tuple[int, int]
    frame: Frame | None = None


# Worker -> display


@dataclass(frozen=True)
class NewFrame:
    """Replace the displayed cell grid."""

    frame: Frame


@dataclass(frozen=True)
class ChangeSize:
    """Request a display resize."""

    dimensions: Dimensions


@dataclass(frozen=True)
class RegisterGUI:
    """Track one overlay at a draw priority."""

    priority: int
    gui: GUI | None


@dataclass(frozen=True)
class RegisterGUIs:
    """Track several overlays at a draw priority."""

    priority: int
    guis: tuple[GUI | None, ...]


@dataclass(frozen=True)
class UpdateGUI:
    """Replace the content of a registered overlay."""

    gui_id: int
    frame: Frame


RenderPacket = NewFrame | ChangeSize | RegisterGUI | RegisterGUIs | UpdateGUI


# Display -> worker


@dataclass(frozen=True)
class Key:
    """A captured key press."""

    keycode: str


@dataclass(frozen=True)
class LoopClosed:
    """The display has exited."""


@dataclass(frozen=True)
class RegisteredGUI:
    """Acknowledges a RegisterGUI, correlated by priority."""

    priority: int
    gui_id: int


@dataclass(frozen=True)
class RegisteredGUIs:
    """Acknowledges a RegisterGUIs, correlated by priority."""

    priority: int
    gui_ids: tuple[int, ...]


RenderTick = Key | LoopClosed | RegisteredGUI | RegisteredGUIs
