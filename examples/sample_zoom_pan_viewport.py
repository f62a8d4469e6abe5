from __future__ import annotations

import numpy as np
from nicegui import ui

from nicezoom.utils.logging import configure_logging
from nicezoom.zoom_pan import GestureConfig, ZoomPanViewport


def create_demo_svg(width: int = 600, height: int = 300) -> str:
    """Simple SVG line chart: two phase-shifted sine waves."""
    x = np.linspace(0, 4 * np.pi, 200)
    xs = np.linspace(20, width - 20, x.size)
    paths = []
    for phase, color in ((0.0, "steelblue"), (np.pi / 2, "tomato")):
        ys = height / 2 - (height / 2 - 20) * np.sin(x + phase)
        points = " ".join(f"{a:.1f},{b:.1f}" for a, b in zip(xs, ys))
        paths.append(f'<polyline points="{points}" fill="none" stroke="{color}" stroke-width="2" />')
    return (
        f'<svg width="{width}" height="{height}" xmlns="http://www.w3.org/2000/svg">'
        f'<rect width="{width}" height="{height}" fill="white" stroke="#999" />'
        + "".join(paths)
        + "</svg>"
    )


if __name__ in {"__main__", "__mp_main__"}:
    configure_logging(level="DEBUG")

    with ui.column().classes("w-full gap-2"):
        ui.label("ZoomPanViewport demo: Ctrl+wheel, drag, pinch, double-click").classes("text-lg font-bold")

        viewport = ZoomPanViewport(
            config=GestureConfig(
                max_scale=3.0,
                on_user_zoom=lambda s: ui.notify(f"zoom {s:.0%}", timeout=0.5),
            ),
        )
        viewport.render_toolbar()

        with ui.card().classes("w-[640px] h-[340px] p-0"):
            with viewport.render():
                ui.html(create_demo_svg())

        ui.switch(
            "Drag to pan",
            value=True,
            on_change=lambda e: viewport.configure(enable_drag=bool(e.value)),
        )

    ui.run(reload=False)
