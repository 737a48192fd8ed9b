"""Tests for chart rendering."""

import io
from datetime import timedelta

from PIL import Image

from hygro.dht.chart import (
    HUMIDITY_LEGEND,
    TEMPERATURE_LEGEND,
    _humidity_range,
    _value_range,
    render_chart,
)
from hygro.lib.config import ChartSettings

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class TestRenderChart:
    """Tests for render_chart."""

    def test_empty_readings_render_nothing(self):
        assert render_chart([]) is None

    def test_renders_png_of_configured_size(self, make_reading):
        readings = [make_reading(i, 20.0 + i / 10, 50.0 - i / 10) for i in range(30)]

        png = render_chart(readings)

        assert png.startswith(_PNG_SIGNATURE)
        assert Image.open(io.BytesIO(png)).size == (1024, 512)

    def test_single_reading(self, sample_reading):
        png = render_chart([sample_reading])

        assert png.startswith(_PNG_SIGNATURE)

    def test_custom_settings(self, make_reading):
        cfg = ChartSettings(width=400, height=300, time_padding=timedelta(0))
        readings = [make_reading(0, 20.0), make_reading(1, 20.5)]

        png = render_chart(readings, cfg)

        assert Image.open(io.BytesIO(png)).size == (400, 300)

    def test_temperature_line_is_drawn(self, make_reading):
        readings = [make_reading(i, 20.0, 50.0) for i in range(10)]

        image = Image.open(io.BytesIO(render_chart(readings))).convert("RGB")

        assert (255, 128, 0) in {color for _, color in image.getcolors(2**16)}


class TestValueRanges:
    """Tests for axis range calculation."""

    def test_minimum_margin_of_one(self):
        assert _value_range([20.0, 20.5]) == (19.0, 21.5)

    def test_margin_is_fifteen_percent_of_span(self):
        low, high = _value_range([10.0, 30.0])
        assert (low, high) == (7.0, 33.0)

    def test_humidity_clamped_to_percent(self):
        assert _humidity_range([0.5, 99.5]) == (0.0, 100.0)

    def test_humidity_never_collapses(self):
        low, high = _humidity_range([120.0])
        assert high > low


def test_legend_labels_carry_units():
    assert TEMPERATURE_LEGEND == "Temperature [°C]"
    assert HUMIDITY_LEGEND == "Rel. Humidity [%]"
