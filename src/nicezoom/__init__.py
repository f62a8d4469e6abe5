"""
nicezoom: zoom and pan for fixed 2D content (charts, diagrams) in NiceGUI.

This package provides:
- ZoomPanViewport: NiceGUI container with Ctrl+wheel zoom, drag pan,
  pinch zoom and double-click reset
- ZoomPanController: the toolkit-independent gesture state machine behind it
- Logging utilities for library and application use

For logging configuration in standalone scripts/demos:
    ```python
    from nicezoom.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from nicezoom.utils.logging import configure_logging, get_logger

from nicezoom.zoom_pan import GestureConfig, ViewportTransform, ZoomPanController, ZoomPanViewport

# NullHandler until an application (or configure_logging) installs a real one
_logger = logging.getLogger("nicezoom")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "GestureConfig",
    "ViewportTransform",
    "ZoomPanController",
    "ZoomPanViewport",
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
