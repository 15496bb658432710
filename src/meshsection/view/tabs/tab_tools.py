"""
Cross-Section & Measurement Control Panel
"""
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QPushButton, QGroupBox, QFormLayout, QCheckBox,
    QComboBox, QSlider, QHBoxLayout
)
from PySide6.QtCore import Signal, Qt

from meshsection.config import POSITION_SLIDER_RANGE
from meshsection.controller.cross_section import CrossSectionController
from meshsection.controller.measurement import MeasurementController
from meshsection.model.geometry import Axis


class ToolsControlPanel(QWidget):
    # Plane or cross-section enablement changed -> re-slice + redraw
    section_changed = Signal()
    # Measurement tool toggled or cleared
    measurement_changed = Signal()
    # Click routing changed (picking vs. orbit)
    picking_changed = Signal()

    def __init__(self, section: CrossSectionController, measurement: MeasurementController) -> None:
        super().__init__()
        self.section = section
        self.measurement = measurement

        layout = QVBoxLayout(self)

        # --- Cross-section Group ---
        grp_section = QGroupBox("Cross-Section")
        form = QFormLayout(grp_section)

        self.chk_section = QCheckBox("")
        self.chk_section.toggled.connect(self.on_section_toggled)
        form.addRow("Enable cross-section", self.chk_section)

        self.cmb_axis = QComboBox()
        for axis in Axis:
            self.cmb_axis.addItem(axis.value.upper(), axis)
        self.cmb_axis.setCurrentIndex(1)  # Y, matches the default plane
        self.cmb_axis.currentIndexChanged.connect(self.on_axis_changed)
        form.addRow("Axis:", self.cmb_axis)

        slider_row = QHBoxLayout()
        self.sld_position = QSlider(Qt.Horizontal)
        self.sld_position.setRange(*POSITION_SLIDER_RANGE)
        self.sld_position.setValue(0)
        self.sld_position.valueChanged.connect(self.on_position_changed)
        slider_row.addWidget(self.sld_position, 1)
        self.lbl_position = QLabel("0.0")
        self.lbl_position.setMinimumWidth(40)
        slider_row.addWidget(self.lbl_position)
        form.addRow("Position:", slider_row)

        self.btn_set_plane = QPushButton("Set Plane from 2 Points")
        self.btn_set_plane.clicked.connect(self.on_set_plane_clicked)
        form.addRow(self.btn_set_plane)

        self.lbl_section_status = QLabel("")
        self.lbl_section_status.setStyleSheet("color: #00aa00;")
        self.lbl_section_status.hide()
        form.addRow(self.lbl_section_status)

        layout.addWidget(grp_section)

        # --- Measurement Group ---
        grp_measure = QGroupBox("Measurement")
        form_m = QFormLayout(grp_measure)

        self.chk_measure = QCheckBox("")
        self.chk_measure.toggled.connect(self.on_measure_toggled)
        form_m.addRow("Enable measurement", self.chk_measure)

        self.btn_clear_measure = QPushButton("Clear Measurement")
        self.btn_clear_measure.clicked.connect(self.on_clear_measure_clicked)
        form_m.addRow(self.btn_clear_measure)

        self.lbl_distance = QLabel("-")
        form_m.addRow("Distance:", self.lbl_distance)

        layout.addWidget(grp_measure)
        layout.addStretch()

        self._set_section_controls_enabled(False)

    # --- PUBLIC ---

    def update_section_status(self) -> None:
        """Shows the point-picking prompt while the plane is being set."""
        message = self.section.status_message()
        self.lbl_section_status.setText(message)
        self.lbl_section_status.setVisible(bool(message))

    def update_distance(self) -> None:
        current = self.measurement.measurement
        self.lbl_distance.setText(current.label if current is not None else "-")

    # --- SLOTS ---

    def on_section_toggled(self, checked: bool) -> None:
        self.section.set_enabled(checked)
        self._set_section_controls_enabled(checked)
        self.update_section_status()
        self.section_changed.emit()
        self.picking_changed.emit()

    def on_axis_changed(self, index: int) -> None:
        axis = self.cmb_axis.itemData(index)
        self.section.set_axis(axis)

        # Axis presets pass through the origin
        self.sld_position.blockSignals(True)
        self.sld_position.setValue(0)
        self.sld_position.blockSignals(False)
        self.lbl_position.setText("0.0")

        self.update_section_status()
        self.section_changed.emit()

    def on_position_changed(self, value: int) -> None:
        self.section.set_position(float(value))
        self.lbl_position.setText(f"{float(value):.1f}")
        self.section_changed.emit()

    def on_set_plane_clicked(self) -> None:
        self.section.set_setting_mode(True)
        self.update_section_status()
        self.section_changed.emit()
        self.picking_changed.emit()

    def on_measure_toggled(self, checked: bool) -> None:
        self.measurement.set_enabled(checked)
        self.update_distance()
        self.measurement_changed.emit()
        self.picking_changed.emit()

    def on_clear_measure_clicked(self) -> None:
        self.measurement.clear()
        self.update_distance()
        self.measurement_changed.emit()

    # --- INTERNAL ---

    def _set_section_controls_enabled(self, enabled: bool) -> None:
        self.cmb_axis.setEnabled(enabled)
        self.sld_position.setEnabled(enabled)
        self.btn_set_plane.setEnabled(enabled)
