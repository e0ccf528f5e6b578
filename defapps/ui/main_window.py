"""Main window: applications grouped by type category, and their MIME types."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QVBoxLayout, QTreeWidget,
    QTreeWidgetItem, QListWidget, QListWidgetItem, QPushButton,
    QAbstractItemView, QMessageBox, QStatusBar,
)

from defapps.app import DefappsApp
from defapps.core.errors import DefappsError
from defapps.core.icon_resolver import mimetype_icon, preload_mimetype_icons, resolve_icon
from defapps.core.mimeapps import AssociationWriter

DATA_ROLE = Qt.ItemDataRole.UserRole


class MainWindow(QMainWindow):
    def __init__(self, app: DefappsApp) -> None:
        super().__init__()
        self.app = app
        self.config = app.config
        self.index = app.index
        self.resolver = app.resolver
        self.writer = AssociationWriter(self.index, self.resolver)

        self.setWindowTitle("Default Applications")
        self.resize(
            self.config.get("window_width"),
            self.config.get("window_height"),
        )

        # Selecting an application with hundreds of types gets sluggish otherwise
        preload_mimetype_icons(self.index.all_mimetypes(), self.resolver)

        central = QWidget()
        self.setCentralWidget(central)
        layout = QHBoxLayout(central)

        self._app_tree = QTreeWidget()
        self._app_tree.setHeaderHidden(True)
        layout.addWidget(self._app_tree, 1)

        right = QVBoxLayout()
        self._mimetype_list = QListWidget()
        self._mimetype_list.setSelectionMode(QAbstractItemView.SelectionMode.MultiSelection)
        right.addWidget(self._mimetype_list, 1)

        self._set_default_btn = QPushButton("Set as default application for these file types")
        self._set_default_btn.setEnabled(False)
        right.addWidget(self._set_default_btn)
        layout.addLayout(right, 1)

        self.setStatusBar(QStatusBar())
        self._populate_tree()

        self._app_tree.itemSelectionChanged.connect(self._on_application_selected)
        self._set_default_btn.clicked.connect(self._on_set_default)

    def _populate_tree(self) -> None:
        for category in self.index.categories():
            category_item = QTreeWidgetItem([category])
            for identity in self.index.sorted_applications_in(category):
                meta = self.index.metadata_for(identity)
                app_item = QTreeWidgetItem([meta.display_name])
                app_item.setData(0, DATA_ROLE, identity)
                app_item.setIcon(0, resolve_icon(meta.icon))
                category_item.addChild(app_item)
            self._app_tree.addTopLevelItem(category_item)
        self.statusBar().showMessage(
            f"{len(self.index.identities())} applications found"
        )

    def _selected_application(self) -> tuple[str, str] | None:
        """(category, identity) of the selected application item, if any."""
        items = self._app_tree.selectedItems()
        if len(items) != 1 or items[0].parent() is None:
            return None
        item = items[0]
        identity = item.data(0, DATA_ROLE)
        if not identity:
            return None
        return item.parent().text(0), identity

    # ── Slots ──
    def _on_application_selected(self) -> None:
        self._set_default_btn.setEnabled(False)
        self._mimetype_list.clear()

        selection = self._selected_application()
        if selection is None:
            return
        category, identity = selection

        for name in self.index.mimetypes_claimed_by(identity, category):
            info = self.resolver.resolve(name)
            item = QListWidgetItem(info.label if info else name)
            item.setData(DATA_ROLE, name)
            item.setIcon(mimetype_icon(name, self.resolver))
            self._mimetype_list.addItem(item)
            item.setSelected(True)

        self._set_default_btn.setEnabled(self._mimetype_list.count() > 0)

    def _on_set_default(self) -> None:
        selection = self._selected_application()
        if selection is None:
            return
        _, identity = selection

        selected: set[str] = set()
        deselected: set[str] = set()
        for row in range(self._mimetype_list.count()):
            item = self._mimetype_list.item(row)
            name = item.data(DATA_ROLE)
            (selected if item.isSelected() else deselected).add(name)

        path = self.config.mimeapps_path()
        try:
            self.writer.save(path, identity, selected, deselected)
        except DefappsError as e:
            QMessageBox.warning(self, "Failed to store settings", str(e))
            return

        name = self.index.metadata_for(identity).display_name
        self.statusBar().showMessage(f"{name} set as default for {len(selected)} file types")

    # ── Persist window geometry ──
    def closeEvent(self, event) -> None:
        self.config.set("window_width", self.width())
        self.config.set("window_height", self.height())
        super().closeEvent(event)
