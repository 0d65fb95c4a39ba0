import numpy as np
import pandas as pd
from nicegui import ui

from boxwhisker.options import VisualOptions
from boxwhisker.utils.logging import configure_logging
from boxwhisker.widget import BoxWhiskerWidget

configure_logging(level="DEBUG")

rng = np.random.default_rng(0)
minutes = list(range(0, 24 * 60, 30))


def make_frame() -> pd.DataFrame:
    days = ["Mon", "Tue", "Wed", "Thu", "Fri"]
    data = {m: rng.gamma(shape=2.0, scale=rng.uniform(4, 12), size=len(days)).round(1) for m in minutes}
    return pd.DataFrame(data, index=days)


with ui.header().classes("py-2 px-4"):
    ui.label("Box and whisker demo")

widget = BoxWhiskerWidget(options=VisualOptions(y_title="Wait (min)", outlier_factor=0.5, goal=15.0))
widget.render()
widget.set_data(make_frame(), (900, 450))

with ui.row():
    ui.button("New data", on_click=lambda: widget.set_data(make_frame()))
    ui.button("Bad data", on_click=lambda: widget.set_points({"Mon": [1, 2, "three"]}))

ui.run()
