"""HTML dashboard showing the latest reading and a chart of the history."""

import asyncio
import base64
from collections.abc import Sequence

from starlette.requests import Request
from starlette.responses import HTMLResponse

from hygro.dht.chart import render_chart
from hygro.dht.models import Reading
from hygro.dht.store import ReadingStore
from hygro.lib.config import ChartSettings, Unit
from hygro.logging import get_logger

logger = get_logger("server.views.dashboard")

TIME_FORMAT = "%d.%m.%Y %H:%M:%S"
NO_DATA_BODY = "<body>No data available</body>"
PLOT_UNAVAILABLE = "Plot not available"

_PAGE = """\
<head>\
<meta charset="utf-8" />\
<title>Temperature & Humidity</title>\
</head>\
<body>\
<div>\
{time}<br />\
Temperature: {temperature:.1f} {temp_unit}<br />\
Relative Humidity: {rel_humidity:.1f} {rel_unit}<br />\
Absolute Humidity: {abs_humidity:.3f} {abs_unit}<br />\
</div>\
<div>\
{plot}\
</div>\
</body>"""


async def _render_plot(
    readings: Sequence[Reading], cfg: ChartSettings | None
) -> str:
    """Render the chart off the event loop, degrading to a placeholder."""
    try:
        png = await asyncio.to_thread(render_chart, readings, cfg)
    except Exception:
        logger.exception("Failed to render chart")
        return PLOT_UNAVAILABLE
    if png is None:
        return PLOT_UNAVAILABLE
    encoded = base64.b64encode(png).decode("ascii")
    return f'<img src="data:image/png;base64,{encoded}" alt="{PLOT_UNAVAILABLE}" />'


def render_page(latest: Reading, plot: str) -> str:
    return _PAGE.format(
        time=latest.time.strftime(TIME_FORMAT),
        temperature=latest.temperature,
        temp_unit=Unit.CELSIUS,
        rel_humidity=latest.relative_humidity,
        rel_unit=Unit.PERCENT,
        abs_humidity=latest.absolute_humidity,
        abs_unit=Unit.GRAMS_PER_CUBIC_METER,
        plot=plot,
    )


async def index(request: Request) -> HTMLResponse:
    """Return the latest reading and a chart of all stored readings."""
    store: ReadingStore = request.app.state.store
    readings = store.snapshot()
    if not readings:
        return HTMLResponse(NO_DATA_BODY)

    plot = await _render_plot(readings, request.app.state.settings.chart)
    return HTMLResponse(render_page(readings[-1], plot))
