from __future__ import annotations

import pytest

from spinlog.animations import (
    Animation,
    AnimationType,
    PulseColorAnimation,
    PulseOpacityAnimation,
    RainbowAnimation,
    SequentialDotsAnimation,
    SpinnerAnimation,
    create_animation,
)


def _advance(animation, ticks: int) -> None:
    for _ in range(ticks):
        animation.tick()


def test_sequential_dots_sweep():
    dots = SequentialDotsAnimation("cyan")
    assert dots.current_frame() == ".    "
    _advance(dots, 15)
    assert dots.current_frame() == ".    "
    dots.tick()
    assert dots.current_frame() == "..   "
    _advance(dots, 48)
    assert dots.current_frame() == "....."
    _advance(dots, 15)
    assert dots.ticks == 79
    assert dots.current_frame() == "....."


def test_sequential_dots_cycle_length_is_80():
    dots = SequentialDotsAnimation("cyan")
    first = dots.current_frame()
    _advance(dots, 80)
    assert dots.current_frame() == first
    assert dots.current_color() == "cyan"


def test_spinner_frame_index():
    spinner = SpinnerAnimation("green")
    for tick in range(120):
        assert spinner.frame_index() == (tick // 4) % 10
        assert spinner.current_frame() == SpinnerAnimation.FRAMES[(tick // 4) % 10]
        spinner.tick()


def test_pulse_color_advances_every_three_ticks():
    pulse = PulseColorAnimation("white")
    assert pulse.current_frame() == "●"
    seen = []
    for _ in range(18):
        seen.append(pulse.current_color())
        pulse.tick()
    assert seen[:3] == ["red"] * 3
    assert seen[3] == "yellow"
    assert seen[15:] == ["magenta"] * 3
    assert pulse.current_color() == "red"


def test_rainbow_advances_every_two_ticks():
    rainbow = RainbowAnimation("white")
    colors = []
    for _ in range(12):
        colors.append(rainbow.current_color())
        rainbow.tick()
    assert colors[::2] == RainbowAnimation.PALETTE
    assert colors[1::2] == RainbowAnimation.PALETTE
    assert rainbow.current_frame() == "●"


def test_pulse_opacity_alternates_intensity():
    pulse = PulseOpacityAnimation("cyan")
    assert pulse.current_color() == "bold cyan"
    _advance(pulse, 3)
    assert pulse.current_color() == "dim cyan"
    _advance(pulse, 3)
    assert pulse.current_color() == "bold cyan"


def test_reset_returns_to_first_frame():
    spinner = SpinnerAnimation("green")
    _advance(spinner, 13)
    assert spinner.current_frame() != SpinnerAnimation.FRAMES[0]
    spinner.reset()
    assert spinner.ticks == 0
    assert spinner.current_frame() == SpinnerAnimation.FRAMES[0]


@pytest.mark.parametrize(
    ("kind", "cls"),
    [
        ("sequential_dots", SequentialDotsAnimation),
        ("spinner", SpinnerAnimation),
        (AnimationType.PULSE_COLOR, PulseColorAnimation),
        (AnimationType.PULSE_OPACITY, PulseOpacityAnimation),
        (AnimationType.RAINBOW, RainbowAnimation),
    ],
)
def test_create_animation(kind, cls):
    animation = create_animation(kind, "blue")
    assert isinstance(animation, cls)
    assert animation.animation_type == AnimationType(kind)
    assert animation.color == "blue"


def test_create_animation_rejects_unknown_type():
    with pytest.raises(ValueError, match="Unknown animation type"):
        create_animation("sparkle", "blue")


def test_animation_without_frame_cannot_be_created():
    class Blank(Animation):
        pass

    with pytest.raises(TypeError):
        Blank("cyan")
