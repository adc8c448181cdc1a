#!/usr/bin/env python3
"""
The debug console widget.

Shows the entries of a LogStore, most recent first, with a text filter, a
pause button and a menu for extra actions, stack trace expansion, saving and
clearing.
"""

from typing import Iterable, List, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QListWidget, QListWidgetItem,
    QLineEdit, QPushButton, QLabel, QToolBar, QToolButton, QMenu,
    QAbstractItemView, QSizePolicy
)
from PySide6.QtGui import QAction, QBrush, QCloseEvent
from PySide6.QtCore import Qt, Signal, Slot

from debug_console.broadcaster import Snapshot
from debug_console.filter_model import LogFilter, sort_for_display
from debug_console.log_entry import LogEntry
from debug_console.log_store import LogStore, get_default_store
from debug_console.logging_config import get_logger
from debug_console.persistence import LogFileWriter

from .bridge import SnapshotBridge
from .settings_manager import SettingsManager

logger = get_logger("Widget")


class DebugConsole(QWidget):
    """Panel displaying the entries of a LogStore."""

    # Emitted with the number of visible entries after every refresh
    logs_updated = Signal(int)
    paused_changed = Signal(bool)

    def __init__(self, store: Optional[LogStore] = None, actions: Iterable[QAction] = (),
                 title: Optional[str] = None, show_toolbar: bool = True,
                 expand_stack_trace: Optional[bool] = None, save_path: Optional[str] = None,
                 settings_manager: Optional[SettingsManager] = None,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.store = store if store is not None else get_default_store()
        self.extra_actions: List[QAction] = list(actions)
        self.title = title or "Debug Console"
        self.save_path = save_path
        self.settings_manager = settings_manager if settings_manager is not None else SettingsManager()

        self.log_filter = LogFilter(self.settings_manager.get_filter_text())
        if expand_stack_trace is None:
            expand_stack_trace = self.settings_manager.get_expand_stack_trace()
        self.expand_stack_trace = expand_stack_trace
        self.save_enabled = self.settings_manager.get_save_enabled()
        self.level_colors = self.settings_manager.get_log_level_colors()

        self.writer: Optional[LogFileWriter] = LogFileWriter(save_path) if save_path else None
        self._entries: List[LogEntry] = sort_for_display(self.store.entries())

        self._setup_ui(show_toolbar)

        self._bridge = SnapshotBridge(self)
        self._bridge.snapshot_ready.connect(self._on_snapshot)
        self.subscription = self.store.subscribe(self._bridge.publish)

        self._refresh()

    def _setup_ui(self, show_toolbar: bool):
        """Set up the user interface."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.toolbar = QToolBar(self.title)
        self.toolbar.setObjectName("debugConsoleToolBar")
        title_label = QLabel(self.title)
        title_label.setObjectName("debugConsoleTitle")
        self.toolbar.addWidget(title_label)
        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        self.toolbar.addWidget(spacer)

        self.menu = QMenu(self)
        self._build_menu()
        self.menu_button = QToolButton()
        self.menu_button.setObjectName("debugConsoleMenuButton")
        self.menu_button.setText("⋮")
        self.menu_button.setPopupMode(QToolButton.ToolButtonPopupMode.InstantPopup)
        self.menu_button.setMenu(self.menu)
        self.toolbar.addWidget(self.menu_button)
        self.toolbar.setVisible(show_toolbar)
        layout.addWidget(self.toolbar)

        self.log_list = QListWidget()
        self.log_list.setObjectName("debugConsoleList")
        self.log_list.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        self.log_list.setWordWrap(True)
        layout.addWidget(self.log_list, 1)

        self.empty_label = QLabel("No logs")
        self.empty_label.setObjectName("debugConsoleEmptyLabel")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.empty_label, 1)

        filter_row = QHBoxLayout()
        filter_row.setContentsMargins(10, 5, 10, 10)

        self.filter_edit = QLineEdit()
        self.filter_edit.setObjectName("debugConsoleFilter")
        self.filter_edit.setPlaceholderText("Filter logs")
        self.filter_edit.setText(self.log_filter.text)
        self.filter_edit.textChanged.connect(self.set_filter_text)
        filter_row.addWidget(self.filter_edit, 1)

        self.clear_filter_button = QPushButton("✕")
        self.clear_filter_button.setObjectName("debugConsoleClearFilter")
        self.clear_filter_button.setToolTip("Clear filter")
        self.clear_filter_button.clicked.connect(self.filter_edit.clear)
        filter_row.addWidget(self.clear_filter_button)

        self.pause_button = QPushButton()
        self.pause_button.setObjectName("debugConsolePauseButton")
        self.pause_button.clicked.connect(lambda: self.toggle_logging())
        filter_row.addWidget(self.pause_button)

        layout.addLayout(filter_row)
        self._update_pause_controls(False)

    def _build_menu(self):
        for action in self.extra_actions:
            self.menu.addAction(action)
        if self.extra_actions:
            self.menu.addSeparator()

        self.pause_action = QAction("Pause logging", self)
        self.pause_action.setCheckable(True)
        self.pause_action.toggled.connect(self.set_paused)
        self.menu.addAction(self.pause_action)

        self.expand_action = QAction("Expand StackTrace", self)
        self.expand_action.setCheckable(True)
        self.expand_action.setChecked(self.expand_stack_trace)
        self.expand_action.toggled.connect(self.set_expand_stack_trace)
        self.menu.addAction(self.expand_action)

        self.save_action: Optional[QAction] = None
        if self.save_path is not None:
            self.save_action = QAction("Save", self)
            self.save_action.setCheckable(True)
            self.save_action.setChecked(self.save_enabled)
            self.save_action.toggled.connect(self.set_save_enabled)
            self.menu.addAction(self.save_action)

        self.clear_action = QAction("Clear", self)
        self.clear_action.triggered.connect(self.clear)
        self.menu.addAction(self.clear_action)

    # --- State ---

    @property
    def is_paused(self) -> bool:
        return self.subscription.is_paused

    def entries(self) -> List[LogEntry]:
        """Entries of the last received snapshot, most recent first."""
        return list(self._entries)

    def visible_entries(self) -> List[LogEntry]:
        return self.log_filter.apply(self._entries)

    @Slot(str)
    def set_filter_text(self, text: str):
        self.log_filter.set_text(text)
        if self.filter_edit.text() != text:
            self.filter_edit.setText(text)
        self.settings_manager.set_filter_text(text)
        self._refresh()

    @Slot(bool)
    def set_paused(self, paused: bool):
        if paused == self.is_paused:
            return
        # Resuming can deliver a snapshot right away, update controls first
        self._update_pause_controls(paused)
        if paused:
            self.subscription.pause()
        else:
            self.subscription.resume()
        self.paused_changed.emit(paused)

    def toggle_logging(self):
        self.set_paused(not self.is_paused)

    @Slot(bool)
    def set_expand_stack_trace(self, expanded: bool):
        self.expand_stack_trace = expanded
        if self.expand_action.isChecked() != expanded:
            self.expand_action.setChecked(expanded)
        self.settings_manager.set_expand_stack_trace(expanded)
        self._refresh()

    @Slot(bool)
    def set_save_enabled(self, enabled: bool):
        if enabled and not self.save_enabled:
            self.save_to_file()
        self.save_enabled = enabled
        if self.save_action is not None and self.save_action.isChecked() != enabled:
            self.save_action.setChecked(enabled)
        self.settings_manager.set_save_enabled(enabled)

    def save_to_file(self, entries: Optional[Iterable[LogEntry]] = None):
        """Queue a write of ``entries`` (the displayed entries by default) to the save path."""
        if self.writer is None:
            return
        self.writer.write(self._entries if entries is None else entries)

    @Slot()
    def clear(self):
        self.store.clear()

    # --- Updates ---

    @Slot(object)
    def _on_snapshot(self, snapshot: Snapshot):
        if self.writer is not None and self.save_enabled:
            self.writer.write(snapshot)
        self._entries = sort_for_display(snapshot)
        self._refresh()

    def _refresh(self):
        visible = self.visible_entries()
        self.log_list.clear()
        for entry in visible:
            self.log_list.addItem(self._create_item(entry))

        has_logs = bool(self._entries)
        self.log_list.setVisible(has_logs)
        self.empty_label.setVisible(not has_logs)
        self.logs_updated.emit(len(visible))

    def _create_item(self, entry: LogEntry) -> QListWidgetItem:
        text = entry.render() if self.expand_stack_trace else entry.header()
        item = QListWidgetItem(text)
        item.setData(Qt.ItemDataRole.UserRole, entry)
        color = self.level_colors.get(entry.level)
        if color is not None and color.isValid():
            item.setForeground(QBrush(color))
        if entry.stack_trace and not self.expand_stack_trace:
            item.setToolTip(entry.stack_trace)
        return item

    def _update_pause_controls(self, paused: bool):
        self.pause_button.setText("Resume" if paused else "Pause")
        self.pause_button.setToolTip("Resume logging" if paused else "Pause logging")
        if self.pause_action.isChecked() != paused:
            self.pause_action.blockSignals(True)
            self.pause_action.setChecked(paused)
            self.pause_action.blockSignals(False)

    # --- Lifecycle ---

    def shutdown(self):
        """Stop listening to the store and finish pending writes."""
        self.subscription.cancel()
        if self.writer is not None:
            self.writer.close()

    def closeEvent(self, event: QCloseEvent):
        self.shutdown()
        super().closeEvent(event)
