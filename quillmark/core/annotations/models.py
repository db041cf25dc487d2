"""
Annotation data model.

Positions are stored in overlay space: the pixel grid of the rendered
page, origin at the top-left corner, y growing downward. ``(x, y)`` is
always the top-left corner of the object.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

MIN_FONT_SIZE = 8
MAX_FONT_SIZE = 72
MIN_SIGNATURE_WIDTH = 50
MIN_SIGNATURE_HEIGHT = 20
CHECKBOX_SIZE = 15

RGB = Tuple[int, int, int]


class ToolMode(Enum):
    """Active placement/interaction behaviour of the canvas."""
    SELECT = "select"
    TEXT = "text"
    CHECKBOX = "checkbox"


def clamp_font_size(size: float) -> int:
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, int(size)))


def clamp_signature_size(width: float, height: float) -> Tuple[float, float]:
    return max(MIN_SIGNATURE_WIDTH, width), max(MIN_SIGNATURE_HEIGHT, height)


def clamp_color(color) -> RGB:
    r, g, b = (max(0, min(255, int(c))) for c in tuple(color)[:3])
    return (r, g, b)


@dataclass
class TextAnnotation:
    """A single line of text. ``y`` is the top edge of the text box."""
    id: int
    page: int
    x: float
    y: float
    text: str
    font_size: int = 16
    color: RGB = (0, 0, 0)

    def __post_init__(self):
        self.font_size = clamp_font_size(self.font_size)
        self.color = clamp_color(self.color)


@dataclass
class CheckboxAnnotation:
    """A fixed-size 15x15 box, optionally ticked."""
    id: int
    page: int
    x: float
    y: float
    checked: bool = True


@dataclass
class SignatureAnnotation:
    """A raster signature image drawn at ``width`` x ``height``."""
    id: int
    page: int
    x: float
    y: float
    image: bytes
    width: float = 150
    height: float = 60

    def __post_init__(self):
        self.width, self.height = clamp_signature_size(self.width, self.height)

    def __repr__(self):
        # keep the payload out of logs
        return (f"SignatureAnnotation(id={self.id}, page={self.page}, x={self.x}, "
                f"y={self.y}, width={self.width}, height={self.height}, "
                f"image=<{len(self.image)} bytes>)")


Annotation = Union[TextAnnotation, CheckboxAnnotation, SignatureAnnotation]

RESIZABLE_TYPES = (TextAnnotation, SignatureAnnotation)
