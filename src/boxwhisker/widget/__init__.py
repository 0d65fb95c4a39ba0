"""NiceGUI widget for animated box charts."""

from boxwhisker.widget.box_whisker_widget import BoxWhiskerWidget

__all__ = [
    "BoxWhiskerWidget",
]
