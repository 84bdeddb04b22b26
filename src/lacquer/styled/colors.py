"""Color values used as foreground and background text attributes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Tuple

ColorTuple = Tuple[int, int, int]


def _clamp_channel(value: Any) -> int:
    channel = int(value)
    if channel < 0:
        return 0
    if channel > 255:
        return 255
    return channel


def _clamp_alpha(value: Any) -> float:
    alpha = float(value)
    return min(1.0, max(0.0, alpha))


def normalize_color(value: Any) -> ColorTuple:
    """Convert ``value`` into an RGB tuple, accepting hex strings or sequences."""

    if isinstance(value, Color):
        return value.rgb
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Color strings cannot be empty")
        if text.startswith("#"):
            text = text[1:]
        if "," in text:
            parts = [part.strip() for part in text.split(",") if part.strip()]
            if len(parts) != 3:
                raise ValueError(f"Color '{value}' must have exactly 3 components")
            return tuple(_clamp_channel(int(part, 0)) for part in parts)  # type: ignore[return-value]
        if len(text) in (3, 6):
            if len(text) == 3:
                text = "".join(ch * 2 for ch in text)
            try:
                return tuple(int(text[i : i + 2], 16) for i in range(0, 6, 2))  # type: ignore[return-value]
            except ValueError as exc:
                raise ValueError(f"Unsupported color format: {value!r}") from exc
        raise ValueError(f"Unsupported color format: {value!r}")

    if isinstance(value, Sequence):
        items = list(value)
        if len(items) != 3:
            raise ValueError(f"RGB sequences must contain 3 values, received {value!r}")
        return tuple(_clamp_channel(component) for component in items)  # type: ignore[return-value]

    raise TypeError(f"Cannot convert {type(value)!r} to an RGB color")


@dataclass(slots=True, frozen=True)
class Color:
    """An sRGB color with 8-bit channels and a unit alpha."""

    red: int
    green: int
    blue: int
    alpha: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "red", _clamp_channel(self.red))
        object.__setattr__(self, "green", _clamp_channel(self.green))
        object.__setattr__(self, "blue", _clamp_channel(self.blue))
        object.__setattr__(self, "alpha", _clamp_alpha(self.alpha))

    @property
    def rgb(self) -> ColorTuple:
        return (self.red, self.green, self.blue)

    @property
    def hex(self) -> str:
        return "#" + "".join(f"{component:02x}" for component in self.rgb)

    def css(self) -> str:
        if self.alpha >= 1.0:
            return f"rgb({self.red}, {self.green}, {self.blue})"
        return f"rgba({self.red}, {self.green}, {self.blue}, {self.alpha:g})"

    def with_alpha(self, alpha: float) -> Color:
        return Color(self.red, self.green, self.blue, alpha)

    def to_dict(self) -> dict[str, Any]:
        return {"red": self.red, "green": self.green, "blue": self.blue, "alpha": self.alpha}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Color:
        return cls(payload["red"], payload["green"], payload["blue"], payload.get("alpha", 1.0))

    @classmethod
    def from_value(cls, value: Any) -> Color:
        """Coerce hex strings, ``"r, g, b"`` strings, RGB(A) sequences or colors."""

        if isinstance(value, Color):
            return value
        if isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 4:
            red, green, blue, alpha = value
            return cls(*normalize_color((red, green, blue)), alpha=alpha)
        return cls(*normalize_color(value))


__all__ = ["Color", "ColorTuple", "normalize_color"]
