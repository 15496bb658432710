"""
Main Application Window
=======================
The primary GUI container that holds the Menu Bar, the Control Tabs and the
shared 3D viewport.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It forwards viewport clicks to the active tool controller and
   redraws the viewport (section, markers, measurement) after every change.
"""
import logging
from typing import Iterable

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QSplitter, QTabBar, QStackedWidget, QMessageBox
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction

from meshsection.config import MEASUREMENT_COLOR, SECTION_COLOR
from meshsection.controller.cross_section import CrossSectionController
from meshsection.controller.events import ClickOutcome
from meshsection.controller.measurement import MeasurementController
from meshsection.model.framing import ViewFramer
from meshsection.model.state import ViewerSession
from meshsection.view.tabs.tab_meshes import MeshesControlPanel
from meshsection.view.tabs.tab_tools import ToolsControlPanel
from meshsection.view.widgets.markers import ActorMarkerFactory
from meshsection.view.widgets.plot_3d import MeshViewerWidget

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Mesh Section Viewer"


class MainWindow(QMainWindow):
    def __init__(self, session: ViewerSession) -> None:
        super().__init__()
        self.session: ViewerSession = session
        self.framer = ViewFramer()

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        # --- MAIN CONTAINER ---
        main_widget = QWidget()
        self.setCentralWidget(main_widget)

        # Vertical Layout: Tabs on Top, Splitter Below
        main_layout = QVBoxLayout(main_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        # --- 1. TOP TAB BAR ---
        self.tab_bar = QTabBar()
        self.tab_bar.setDrawBase(True)
        self.tab_bar.setShape(QTabBar.RoundedNorth)
        self.tab_bar.setExpanding(True)

        self.tab_bar.addTab("1. Meshes")
        self.tab_bar.addTab("2. Tools")

        self.tab_bar.setStyleSheet("""
                    QTabBar::tab { height: 35px; min-width: 100px; }
                    QTabBar::tab:selected { font-weight: bold; }
                """)

        main_layout.addWidget(self.tab_bar)

        # --- 2. SPLITTER (CONTENT AREA) ---
        splitter = QSplitter(Qt.Horizontal)
        main_layout.addWidget(splitter)

        # --- RIGHT SIDE: Shared 3D Visualization ---
        # Created first: the marker factories draw into its plotter
        self.visualizer = MeshViewerWidget()

        # --- Controllers ---
        self.section_ctrl = CrossSectionController(
            self.session,
            framer=self.framer,
            marker_factory=ActorMarkerFactory(self.visualizer.plotter, SECTION_COLOR),
        )
        self.measure_ctrl = MeasurementController(
            self.session,
            marker_factory=ActorMarkerFactory(self.visualizer.plotter, MEASUREMENT_COLOR),
        )

        # --- LEFT SIDE: Control Panels (Stacked) ---
        self.controls_stack = QStackedWidget()

        self.meshes_panel = MeshesControlPanel(self.session)
        self.tools_panel = ToolsControlPanel(self.section_ctrl, self.measure_ctrl)

        # Order must match Tab Bar order
        self.controls_stack.addWidget(self.meshes_panel)  # Index 0
        self.controls_stack.addWidget(self.tools_panel)  # Index 1

        splitter.addWidget(self.controls_stack)
        splitter.addWidget(self.visualizer)

        # Set initial proportions (1 part sidebar : 4 parts 3D view)
        splitter.setSizes([350, 1050])

        # --- SIGNAL CONNECTIONS ---
        self.tab_bar.currentChanged.connect(self.controls_stack.setCurrentIndex)

        # 1. Meshes added/removed -> redraw + re-slice + frame
        self.meshes_panel.meshes_changed.connect(self.on_meshes_changed)
        self.meshes_panel.appearance_changed.connect(self.on_appearance_changed)
        self.meshes_panel.center_camera_requested.connect(self.center_camera)

        # 2. Tools
        self.tools_panel.section_changed.connect(self.refresh_section)
        self.tools_panel.measurement_changed.connect(self.refresh_measurement)
        self.tools_panel.picking_changed.connect(self.update_picking)

        # 3. Viewport
        self.visualizer.clicked.connect(self.on_viewport_clicked)
        self.visualizer.camera_changed.connect(self.on_camera_changed)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        self.refresh_section()

    def _create_actions(self) -> None:
        self.act_open = QAction("Open Mesh...", self)
        self.act_open.setShortcut("Ctrl+O")
        self.act_open.triggered.connect(self.meshes_panel.on_open_clicked)

        self.act_clear = QAction("Clear All", self)
        self.act_clear.triggered.connect(self.meshes_panel.on_clear_clicked)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

        self.act_undo_point = QAction("Undo Last Point", self)
        self.act_undo_point.setShortcut("Ctrl+Z")
        self.act_undo_point.triggered.connect(self.on_undo_point)

        self.act_center = QAction("Center Camera", self)
        self.act_center.setShortcut("Ctrl+R")
        self.act_center.triggered.connect(self.center_camera)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_open)
        file_menu.addAction(self.act_clear)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        edit_menu = menu_bar.addMenu("&Edit")
        edit_menu.addAction(self.act_undo_point)

        view_menu = menu_bar.addMenu("&View")
        view_menu.addAction(self.act_center)

    # --- PUBLIC ---

    def load_files(self, paths: Iterable[str]) -> None:
        """Loads files given on the command line."""
        self.meshes_panel.load_files(paths)

    def center_camera(self) -> None:
        camera = self.visualizer.current_camera()
        if self.framer.frame_meshes(self.session.meshes, camera):
            self.visualizer.apply_camera(camera)

    # --- SLOTS ---

    def on_meshes_changed(self) -> None:
        # Picked points may no longer lie on any mesh
        self.section_ctrl.set_setting_mode(False)
        self.section_ctrl.picker.clear_points()
        self.measure_ctrl.clear()

        self.visualizer.sync_meshes(self.session.meshes)
        self.center_camera()

        self.tools_panel.update_section_status()
        self.update_picking()
        self.refresh_section()
        self.refresh_measurement()

    def on_appearance_changed(self) -> None:
        self.visualizer.sync_meshes(self.session.meshes)
        # Hidden meshes drop out of the section; the slice cache skips unchanged states
        self.refresh_section()

    def on_viewport_clicked(self, x: float, y: float) -> None:
        camera = self.visualizer.current_camera()
        viewport = self.visualizer.viewport()

        if self.session.section_setting_mode:
            outcome = self.section_ctrl.handle_click((x, y), camera, viewport)
            if outcome == ClickOutcome.PLANE_REJECTED:
                QMessageBox.warning(
                    self, "Plane Not Set",
                    "The two points do not define a plane: pick two distinct points "
                    "that are not aligned with the view direction."
                )
            if outcome in (ClickOutcome.PLANE_SET, ClickOutcome.PLANE_REJECTED, ClickOutcome.POINT_ADDED):
                self.tools_panel.update_section_status()
                self.refresh_section()
                self.update_picking()
        else:
            outcome = self.measure_ctrl.handle_click((x, y), camera, viewport)
            if outcome in (ClickOutcome.POINT_ADDED, ClickOutcome.MEASURED):
                self.refresh_measurement()

        logger.debug(f"Click outcome: {outcome.value}")

    def on_camera_changed(self) -> None:
        """Re-anchor the measurement label to the new projection."""
        measurement = self.measure_ctrl.refresh_label(
            self.visualizer.current_camera(), self.visualizer.viewport()
        )
        if measurement is not None:
            self.session.measurement = measurement
            self.visualizer.update_measurement(measurement)

    def on_undo_point(self) -> None:
        if self.session.section_setting_mode:
            self.section_ctrl.undo_last_point()
            self.tools_panel.update_section_status()
        else:
            self.measure_ctrl.undo_last_point()
            self.refresh_measurement()
        self.visualizer.plotter.render()

    # --- REFRESH ---

    def refresh_section(self) -> None:
        enabled = self.session.section_enabled
        self.visualizer.update_plane_helper(self.session.plane, enabled)
        self.visualizer.show_section_view(enabled)
        if not enabled:
            return

        section_view = self.visualizer.section_view
        self.section_ctrl.frame_section(section_view.camera)
        section_view.update_section(self.section_ctrl.contours(), self.session.plane)

    def refresh_measurement(self) -> None:
        self.tools_panel.update_distance()
        self.visualizer.update_measurement(self.session.measurement)

    def update_picking(self) -> None:
        self.visualizer.set_picking(self.session.is_picking)

    def closeEvent(self, event, /) -> None:
        """Release markers and close the PyVista plotters safely."""
        self.session.section_picker.clear_points()
        self.session.measure_picker.clear_points()
        if self.visualizer:
            self.visualizer.close_plotters()
        event.accept()
