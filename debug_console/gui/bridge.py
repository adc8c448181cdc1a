from PySide6.QtCore import QObject, Signal

from debug_console.broadcaster import Snapshot


class SnapshotBridge(QObject):
    """
    Re-emits store snapshots as a Qt signal.

    Stores notify on whatever thread appended; connecting to snapshot_ready
    from a widget moves delivery onto the widget's thread.
    """
    snapshot_ready = Signal(object)

    def publish(self, snapshot: Snapshot):
        self.snapshot_ready.emit(snapshot)
