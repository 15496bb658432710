"""
Viewer Session (Data Model)
===========================
This module defines the central state of one viewer session.

Why is this file needed?
------------------------
1. State Management: It holds the loaded meshes, the cutting plane, both point
   selections and the current measurement in one place.
2. Isolation: There are no module-level singletons. Every controller receives
   the session it works on, so independent sessions (e.g. in tests) never
   interfere.
3. Decoupling: Views read from this object; Controllers write to this object.

Classes:
    ViewerSession: The main container class.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from meshsection.model.measure import Measurement
from meshsection.model.mesh import MeshSet
from meshsection.model.picking import CapacityPolicy, PointPicker
from meshsection.model.plane import Plane
from meshsection.model.slicer import SliceCache

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ViewerSession:
    meshes: MeshSet = field(default_factory=MeshSet)

    # --- Cross-section ---
    plane: Plane = field(default_factory=Plane)
    section_enabled: bool = False
    # True while the user is clicking the two plane-defining points
    section_setting_mode: bool = False
    section_picker: PointPicker = field(
        default_factory=lambda: PointPicker(CapacityPolicy.AUTO_CONSUME)
    )
    slice_cache: SliceCache = field(default_factory=SliceCache)

    # --- Measurement ---
    measurement_enabled: bool = False
    measure_picker: PointPicker = field(
        default_factory=lambda: PointPicker(CapacityPolicy.RESET_ON_OVERFLOW)
    )
    measurement: Optional[Measurement] = None

    @property
    def is_picking(self) -> bool:
        """True when clicks go to a point selection instead of the camera."""
        return self.section_setting_mode or self.measurement_enabled

    def reset(self) -> None:
        """Clear all data for a new session."""
        self.section_picker.clear_points()
        self.measure_picker.clear_points()
        self.meshes.clear()
        self.plane = Plane()
        self.section_enabled = False
        self.section_setting_mode = False
        self.measurement_enabled = False
        self.measurement = None
        self.slice_cache.invalidate()
        logger.info("Viewer session has been reset.")
