from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class AnimationType(str, Enum):
    SEQUENTIAL_DOTS = "sequential_dots"
    SPINNER = "spinner"
    PULSE_COLOR = "pulse_color"
    PULSE_OPACITY = "pulse_opacity"
    RAINBOW = "rainbow"


class Animation(ABC):
    """
    Frame/color generator driven by the shared render tick.

    Every variant is a pure function of its tick counter, so one loop can drive
    differently paced effects through integer division alone.
    """

    animation_type: AnimationType

    def __init__(self, color: str):
        self.color = color
        self._tick = 0

    @property
    def ticks(self) -> int:
        return self._tick

    def tick(self) -> None:
        self._tick += 1

    def reset(self) -> None:
        self._tick = 0

    @abstractmethod
    def current_frame(self) -> str: ...

    def current_color(self) -> str:
        return self.color

    def __repr__(self) -> str:
        return f"{type(self).__name__}(color={self.color!r}, tick={self._tick})"


class SequentialDotsAnimation(Animation):
    """Left-to-right fill sweep over five positions."""

    animation_type = AnimationType.SEQUENTIAL_DOTS
    DOT_COUNT = 5
    TICKS_PER_DOT = 16
    DOT = "."

    @property
    def cycle_length(self) -> int:
        return self.DOT_COUNT * self.TICKS_PER_DOT

    def current_frame(self) -> str:
        lit = (self._tick % self.cycle_length) // self.TICKS_PER_DOT
        return "".join(self.DOT if i <= lit else " " for i in range(self.DOT_COUNT))


class SpinnerAnimation(Animation):
    animation_type = AnimationType.SPINNER
    FRAMES = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]
    TICKS_PER_FRAME = 4

    def frame_index(self) -> int:
        return (self._tick // self.TICKS_PER_FRAME) % len(self.FRAMES)

    def current_frame(self) -> str:
        return self.FRAMES[self.frame_index()]


class _DotAnimation(Animation):
    GLYPH = "●"

    def current_frame(self) -> str:
        return self.GLYPH


class PulseColorAnimation(_DotAnimation):
    animation_type = AnimationType.PULSE_COLOR
    PALETTE = ["red", "yellow", "green", "cyan", "blue", "magenta"]
    TICKS_PER_COLOR = 3

    def current_color(self) -> str:
        return self.PALETTE[(self._tick // self.TICKS_PER_COLOR) % len(self.PALETTE)]


class RainbowAnimation(_DotAnimation):
    animation_type = AnimationType.RAINBOW
    PALETTE = [
        "bright_red",
        "bright_yellow",
        "bright_green",
        "bright_cyan",
        "bright_blue",
        "bright_magenta",
    ]
    TICKS_PER_COLOR = 2

    def current_color(self) -> str:
        return self.PALETTE[(self._tick // self.TICKS_PER_COLOR) % len(self.PALETTE)]


class PulseOpacityAnimation(_DotAnimation):
    """Base color breathing between bold and dim intensity."""

    animation_type = AnimationType.PULSE_OPACITY
    INTENSITIES = ["bold", "dim"]
    TICKS_PER_STEP = 3

    def current_color(self) -> str:
        step = (self._tick // self.TICKS_PER_STEP) % len(self.INTENSITIES)
        return f"{self.INTENSITIES[step]} {self.color}"


_ANIMATIONS: dict[AnimationType, type[Animation]] = {
    AnimationType.SEQUENTIAL_DOTS: SequentialDotsAnimation,
    AnimationType.SPINNER: SpinnerAnimation,
    AnimationType.PULSE_COLOR: PulseColorAnimation,
    AnimationType.PULSE_OPACITY: PulseOpacityAnimation,
    AnimationType.RAINBOW: RainbowAnimation,
}


def create_animation(animation_type: AnimationType | str, color: str) -> Animation:
    """Build a fresh animation of the given type with `color` as its base style."""
    try:
        kind = AnimationType(animation_type)
    except ValueError:
        raise ValueError(f"Unknown animation type: {animation_type!r}") from None
    return _ANIMATIONS[kind](color)
