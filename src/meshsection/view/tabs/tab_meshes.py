"""
Mesh Management Control Panel
Open/remove meshes, per-mesh opacity and the mesh statistics.
"""
import logging
from typing import Dict, Iterable, List

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QGroupBox, QSlider,
    QFileDialog, QMessageBox, QScrollArea, QFrame, QCheckBox
)
from PySide6.QtCore import Signal, Qt

from meshsection.config import ASSETS_PATH, SUPPORTED_MESH_EXTENSIONS
from meshsection.model.errors import MeshLoadError
from meshsection.model.io import MeshLoader
from meshsection.model.mesh import SurfaceMesh
from meshsection.model.state import ViewerSession

logger = logging.getLogger(__name__)


class MeshRow(QFrame):
    """Name, remove button and opacity slider of one mesh."""
    opacity_changed = Signal(str, float)
    visibility_changed = Signal(str, bool)
    remove_requested = Signal(str)

    def __init__(self, mesh: SurfaceMesh, parent=None) -> None:
        super().__init__(parent)
        self.mesh_id = mesh.id
        self.setFrameShape(QFrame.StyledPanel)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 4, 6, 4)

        header = QHBoxLayout()
        name = QLabel(mesh.name)
        name.setToolTip(mesh.name)
        header.addWidget(name, 1)

        chk_visible = QCheckBox("")
        chk_visible.setToolTip("Show mesh")
        chk_visible.setChecked(mesh.visible)
        chk_visible.toggled.connect(lambda checked: self.visibility_changed.emit(self.mesh_id, checked))
        header.addWidget(chk_visible)

        btn_remove = QPushButton("x")
        btn_remove.setFixedWidth(24)
        btn_remove.setToolTip("Remove mesh")
        btn_remove.clicked.connect(lambda: self.remove_requested.emit(self.mesh_id))
        header.addWidget(btn_remove)
        layout.addLayout(header)

        slider_row = QHBoxLayout()
        slider_row.addWidget(QLabel("Opacity:"))
        self.slider = QSlider(Qt.Horizontal)
        self.slider.setRange(0, 100)
        self.slider.setValue(round(mesh.opacity * 100))
        self.slider.valueChanged.connect(self.on_slider_changed)
        slider_row.addWidget(self.slider, 1)
        self.lbl_value = QLabel(f"{self.slider.value()}%")
        self.lbl_value.setMinimumWidth(36)
        slider_row.addWidget(self.lbl_value)
        layout.addLayout(slider_row)

    def on_slider_changed(self, value: int) -> None:
        self.lbl_value.setText(f"{value}%")
        self.opacity_changed.emit(self.mesh_id, value / 100.0)


class MeshesControlPanel(QWidget):
    # Mesh added or removed
    meshes_changed = Signal()
    # Opacity or visibility changed
    appearance_changed = Signal()
    center_camera_requested = Signal()

    def __init__(self, session: ViewerSession) -> None:
        super().__init__()
        self.session = session
        self._rows: Dict[str, MeshRow] = {}

        layout = QVBoxLayout(self)

        # --- Actions ---
        self.btn_open = QPushButton("Open Mesh...")
        self.btn_open.setMinimumHeight(36)
        self.btn_open.clicked.connect(self.on_open_clicked)
        layout.addWidget(self.btn_open)

        actions = QHBoxLayout()
        self.btn_center = QPushButton("Center Camera")
        self.btn_center.clicked.connect(self.center_camera_requested.emit)
        actions.addWidget(self.btn_center)
        self.btn_clear = QPushButton("Clear All")
        self.btn_clear.clicked.connect(self.on_clear_clicked)
        actions.addWidget(self.btn_clear)
        layout.addLayout(actions)

        # --- Mesh list ---
        grp = QGroupBox("Loaded Meshes")
        grp_layout = QVBoxLayout(grp)
        scroller = QScrollArea()
        scroller.setWidgetResizable(True)
        inner = QWidget()
        self.list_layout = QVBoxLayout(inner)
        self.list_layout.addStretch()
        scroller.setWidget(inner)
        grp_layout.addWidget(scroller)
        layout.addWidget(grp, 1)

        # --- Stats ---
        self.lbl_stats = QLabel("")
        layout.addWidget(self.lbl_stats)
        self.update_stats()

    # --- PUBLIC ---

    def load_files(self, paths: Iterable[str]) -> List[SurfaceMesh]:
        """Loads mesh files, reporting failures in a dialog."""
        loaded: List[SurfaceMesh] = []
        errors: List[str] = []
        for path in paths:
            try:
                mesh = MeshLoader.load(path)
            except MeshLoadError as e:
                logger.warning(f"Error loading mesh: {e}")
                errors.append(str(e))
                continue
            self.session.meshes.add(mesh)
            self._add_row(mesh)
            loaded.append(mesh)

        if errors:
            QMessageBox.critical(self, "Error", "Failed to load mesh file(s):\n" + "\n".join(errors))

        if loaded:
            self.update_stats()
            self.meshes_changed.emit()
        return loaded

    def update_stats(self) -> None:
        stats = self.session.meshes.stats()
        self.lbl_stats.setText(
            f"<b>Mesh Statistics:</b><br>"
            f"Loaded Meshes: {stats.mesh_count}<br>"
            f"Total Vertices: {stats.vertex_count:,}<br>"
            f"Total Triangles: {stats.triangle_count:,}"
        )

    # --- SLOTS ---

    def on_open_clicked(self) -> None:
        patterns = " ".join(f"*{ext}" for ext in SUPPORTED_MESH_EXTENSIONS)
        fnames, _ = QFileDialog.getOpenFileNames(self, "Open Mesh", ASSETS_PATH, f"Mesh Files ({patterns})")
        if fnames:
            self.load_files(fnames)

    def on_clear_clicked(self) -> None:
        self.session.meshes.clear()
        for row in self._rows.values():
            row.deleteLater()
        self._rows.clear()
        self.update_stats()
        self.meshes_changed.emit()

    def on_remove_requested(self, mesh_id: str) -> None:
        mesh = self.session.meshes.get(mesh_id)
        if mesh is None:
            return
        self.session.meshes.remove(mesh)
        row = self._rows.pop(mesh_id, None)
        if row is not None:
            row.deleteLater()
        self.update_stats()
        self.meshes_changed.emit()

    def on_opacity_changed(self, mesh_id: str, value: float) -> None:
        mesh = self.session.meshes.get(mesh_id)
        if mesh is None:
            return
        mesh.opacity = value
        logger.debug(f"{mesh.name} opacity: {round(value * 100)}%")
        self.appearance_changed.emit()

    def on_visibility_changed(self, mesh_id: str, visible: bool) -> None:
        mesh = self.session.meshes.get(mesh_id)
        if mesh is None:
            return
        mesh.visible = visible
        logger.info(f"{mesh.name} {'shown' if visible else 'hidden'}.")
        self.appearance_changed.emit()

    # --- INTERNAL ---

    def _add_row(self, mesh: SurfaceMesh) -> None:
        row = MeshRow(mesh)
        row.opacity_changed.connect(self.on_opacity_changed)
        row.visibility_changed.connect(self.on_visibility_changed)
        row.remove_requested.connect(self.on_remove_requested)
        # Keep the trailing stretch last
        self.list_layout.insertWidget(self.list_layout.count() - 1, row)
        self._rows[mesh.id] = row
