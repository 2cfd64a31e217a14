from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import ClassVar, Generic, Optional, Tuple, TypeVar, Union

import numpy as np

PixelData = Union[bytes, bytearray, memoryview, np.ndarray]

LocationT = TypeVar("LocationT")
NeedleT = TypeVar("NeedleT")
ProviderDataT = TypeVar("ProviderDataT")


class ColorMode(IntEnum):
    """
    Channel order of interleaved pixel samples.
    """

    BGR = 0
    RGB = 1


class NeedKind(str, Enum):
    IMAGE = "image"
    TEXT = "text"
    WINDOW = "window"


@dataclass(slots=True, frozen=True)
class Region:
    """
    Axis-aligned rectangle in pixel coordinates.
    """

    left: int
    top: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if min(self.left, self.top, self.width, self.height) < 0:
            raise ValueError(f"region fields must be non-negative, got {self}")

    def area(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.left + self.width / 2.0, self.top + self.height / 2.0)

    def __str__(self) -> str:
        return f"{self.left},{self.top},{self.width},{self.height}"


EMPTY_REGION = Region(0, 0, 0, 0)


@dataclass(slots=True, frozen=True, eq=False)
class Image:
    """
    Read-only view of a captured bitmap.

    ``data`` holds ``height`` rows of ``width * channels`` interleaved samples,
    top row first. The matching core never writes into it.
    """

    kind: ClassVar[NeedKind] = NeedKind.IMAGE

    width: int
    height: int
    data: PixelData
    channels: int
    id: str = ""
    color_mode: ColorMode = ColorMode.BGR
    pixel_density: Tuple[float, float] = (1.0, 1.0)

    @property
    def bits_per_pixel(self) -> int:
        return self.channels * 8

    @property
    def byte_width(self) -> int:
        return self.width * self.channels

    @property
    def has_alpha_channel(self) -> bool:
        return self.channels in (2, 4)


@dataclass(slots=True, frozen=True)
class TextQuery:
    """
    Needle for OCR based matchers: a word or line of text to locate.
    """

    kind: ClassVar[NeedKind] = NeedKind.TEXT

    text: str
    case_sensitive: bool = False
    partial: bool = False


@dataclass(slots=True, frozen=True)
class WindowQuery:
    kind: ClassVar[NeedKind] = NeedKind.WINDOW

    title: str


@dataclass(slots=True, frozen=True)
class MatchRequest(Generic[NeedleT, ProviderDataT]):
    """
    Search ``haystack`` for ``needle``.

    ``confidence`` of ``None`` means the matcher's own default threshold.
    """

    haystack: Image
    needle: NeedleT
    confidence: Optional[float] = None
    provider_data: Optional[ProviderDataT] = None


@dataclass(slots=True, frozen=True)
class MatchResult(Generic[LocationT]):
    confidence: float
    location: LocationT
    error: Optional[BaseException] = None

    @property
    def found(self) -> bool:
        return self.error is None


__all__ = [
    "ColorMode",
    "EMPTY_REGION",
    "Image",
    "MatchRequest",
    "MatchResult",
    "NeedKind",
    "PixelData",
    "Region",
    "TextQuery",
    "WindowQuery",
]
