"""Render a temperature and humidity chart for the dashboard.

Draws temperature on the left axis and relative humidity on the right
axis over the time span of the readings, and returns the result as PNG
bytes. Operates on a snapshot of the store, never on the store itself.
"""

import io
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

from PIL import Image, ImageDraw, ImageFont

from hygro.dht.models import Reading
from hygro.lib.config import ChartSettings, Unit, get_settings

_TEMPERATURE_COLOR = (255, 128, 0)
_HUMIDITY_COLOR = (0, 0, 255)
_AXIS_COLOR = (0, 0, 0)
_GRID_COLOR = (224, 224, 224)
_BACKGROUND = (255, 255, 255)

_MARGIN = 15
_CAPTION_HEIGHT = 50
_X_LABEL_AREA = 40
_Y_LABEL_AREA = 60
_TICKS = 8
_LEGEND_LINE = 20

TEMPERATURE_LEGEND = f"Temperature [{Unit.CELSIUS}]"
HUMIDITY_LEGEND = f"Rel. Humidity [{Unit.PERCENT}]"

# Fraction of the value span added above and below each series
_RANGE_MARGIN_RATIO = 0.15
_RANGE_MARGIN_MIN = 1.0


def _font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    return ImageFont.load_default(size=size)


def _value_range(values: Sequence[float]) -> tuple[float, float]:
    """Return (low, high) padded by 15% of the span, and at least 1 unit."""
    low, high = min(values), max(values)
    margin = max(_RANGE_MARGIN_MIN, (high - low) * _RANGE_MARGIN_RATIO)
    return low - margin, high + margin


def _humidity_range(values: Sequence[float]) -> tuple[float, float]:
    low, high = _value_range(values)
    low, high = max(0.0, low), min(100.0, high)
    if high <= low:
        high = low + _RANGE_MARGIN_MIN
    return low, high


def _draw_vertical_text(
    image: Image.Image,
    text: str,
    center: tuple[int, int],
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
) -> None:
    """Draw text rotated 90 degrees counter-clockwise around a center point."""
    measure = ImageDraw.Draw(image)
    left, top, right, bottom = measure.textbbox((0, 0), text, font=font)
    size = (int(right - left) + 2, int(bottom - top) + 2)
    label = Image.new("RGBA", size, (0, 0, 0, 0))
    ImageDraw.Draw(label).text(
        (-left, -top), text, font=font, fill=(*_AXIS_COLOR, 255)
    )
    label = label.rotate(90, expand=True)
    x = center[0] - label.width // 2
    y = center[1] - label.height // 2
    image.paste(label, (x, y), label)


def _draw_aligned(
    draw: ImageDraw.ImageDraw,
    xy: tuple[float, float],
    text: str,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    align: str,
) -> None:
    """Draw text aligned on a point.

    align is a two-letter code: l/m/r horizontally, then t/m vertically.
    """
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    width, height = right - left, bottom - top
    x = xy[0] - {"l": 0, "m": width / 2, "r": width}[align[0]]
    y = xy[1] - {"t": 0, "m": height / 2}[align[1]]
    draw.text((x - left, y - top), text, font=font, fill=_AXIS_COLOR)


class _Frame:
    """Maps time and values onto pixel coordinates of the plot area."""

    def __init__(
        self,
        box: tuple[int, int, int, int],
        start: datetime,
        end: datetime,
    ) -> None:
        self.left, self.top, self.right, self.bottom = box
        self.start = start
        self.span_sec = max((end - start).total_seconds(), 1.0)

    def time_at(self, fraction: float) -> datetime:
        return self.start + timedelta(seconds=fraction * self.span_sec)

    def x(self, time: datetime) -> float:
        offset = (time - self.start).total_seconds() / self.span_sec
        return self.left + offset * (self.right - self.left)

    def y_scale(self, low: float, high: float) -> Callable[[float], float]:
        def scale(value: float) -> float:
            offset = (value - low) / (high - low)
            return self.bottom - offset * (self.bottom - self.top)

        return scale


def render_chart(
    readings: Sequence[Reading], cfg: ChartSettings | None = None
) -> bytes | None:
    """Render readings as a PNG chart.

    Args:
        readings: Readings ordered oldest first.
        cfg: Chart settings, defaults to the global settings.

    Returns:
        PNG bytes, or None if there is nothing to plot.
    """
    if not readings:
        return None
    cfg = cfg or get_settings().chart

    image = Image.new("RGB", (cfg.width, cfg.height), _BACKGROUND)
    draw = ImageDraw.Draw(image)
    caption_font = _font(32)
    desc_font = _font(18)
    label_font = _font(13)

    frame = _Frame(
        (
            _MARGIN + _Y_LABEL_AREA,
            _MARGIN + _CAPTION_HEIGHT,
            cfg.width - _MARGIN - _Y_LABEL_AREA,
            cfg.height - _MARGIN - _X_LABEL_AREA,
        ),
        readings[0].time - cfg.time_padding,
        readings[-1].time + cfg.time_padding,
    )

    temp_low, temp_high = _value_range([r.temperature for r in readings])
    hum_low, hum_high = _humidity_range([r.relative_humidity for r in readings])
    temp_y = frame.y_scale(temp_low, temp_high)
    hum_y = frame.y_scale(hum_low, hum_high)

    caption_width = draw.textlength(cfg.caption, font=caption_font)
    draw.text(
        ((cfg.width - caption_width) / 2, _MARGIN),
        cfg.caption,
        font=caption_font,
        fill=_AXIS_COLOR,
    )

    # Mesh and tick labels
    for i in range(_TICKS + 1):
        fraction = i / _TICKS
        x = frame.left + fraction * (frame.right - frame.left)
        y = frame.bottom - fraction * (frame.bottom - frame.top)
        draw.line([(x, frame.top), (x, frame.bottom)], fill=_GRID_COLOR)
        draw.line([(frame.left, y), (frame.right, y)], fill=_GRID_COLOR)

        time_label = frame.time_at(fraction).strftime("%H:%M")
        _draw_aligned(draw, (x, frame.bottom + 6), time_label, label_font, "mt")

        temp_label = f"{temp_low + fraction * (temp_high - temp_low):.1f}"
        _draw_aligned(draw, (frame.left - 6, y), temp_label, label_font, "rm")
        hum_label = f"{hum_low + fraction * (hum_high - hum_low):.1f}"
        _draw_aligned(draw, (frame.right + 6, y), hum_label, label_font, "lm")

    draw.rectangle(
        [(frame.left, frame.top), (frame.right, frame.bottom)],
        outline=_AXIS_COLOR,
    )
    _draw_vertical_text(
        image,
        f"Temperature [{Unit.CELSIUS}]",
        (_MARGIN + 10, (frame.top + frame.bottom) // 2),
        desc_font,
    )
    _draw_vertical_text(
        image,
        f"Relative Humidity [{Unit.PERCENT}]",
        (cfg.width - _MARGIN - 10, (frame.top + frame.bottom) // 2),
        desc_font,
    )

    # Series
    series = (
        (
            TEMPERATURE_LEGEND,
            _TEMPERATURE_COLOR,
            [(frame.x(r.time), temp_y(r.temperature)) for r in readings],
        ),
        (
            HUMIDITY_LEGEND,
            _HUMIDITY_COLOR,
            [(frame.x(r.time), hum_y(r.relative_humidity)) for r in readings],
        ),
    )
    for _, color, points in series:
        if len(points) > 1:
            draw.line(points, fill=color, width=2)
        else:
            (x, y), = points
            draw.ellipse([(x - 2, y - 2), (x + 2, y + 2)], fill=color)

    # Legend in the upper right corner
    row_height = 20
    legend_width = _LEGEND_LINE + 16 + max(
        int(draw.textlength(label, font=label_font)) for label, _, _ in series
    )
    legend_right = frame.right - 10
    legend_left = legend_right - legend_width
    legend_top = frame.top + 10
    draw.rectangle(
        [
            (legend_left, legend_top),
            (legend_right, legend_top + row_height * len(series) + 6),
        ],
        fill=_BACKGROUND,
        outline=_AXIS_COLOR,
    )
    for row, (label, color, _) in enumerate(series):
        y = legend_top + 3 + row_height * row + row_height // 2
        draw.line(
            [(legend_left + 5, y), (legend_left + 5 + _LEGEND_LINE, y)],
            fill=color,
            width=2,
        )
        _draw_aligned(
            draw, (legend_left + 10 + _LEGEND_LINE, y), label, label_font, "lm"
        )

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
