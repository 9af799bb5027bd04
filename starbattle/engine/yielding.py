"""
Yielding Module - Hand control back to the host event loop during long searches.

The cooperative counter calls a yielder at bounded intervals. The default
pumps the Qt event loop so an interactive window stays responsive (and can
set the cancel flag) while the search keeps its call stack.
"""

from PyQt5.QtCore import QCoreApplication


def qt_process_events() -> None:
    """
    Process pending Qt events if an application exists.

    No-op when the engine runs outside a Qt application (tests, CLI).
    """
    app = QCoreApplication.instance()
    if app is not None:
        app.processEvents()


def no_yield() -> None:
    """Yielder that does nothing."""
    return None
