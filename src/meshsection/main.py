"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) architecture and starts
the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Parses the command line (mesh files, log level, log file).
2. Instantiates the session model (ViewerSession).
3. Instantiates the Main Window (View) and passes the model into it.
4. Prevents circular import errors by being the orchestrator.
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from meshsection.logging_config import setup_logging
from meshsection.model.state import ViewerSession
from meshsection.view.main_window import MainWindow, VISIBLE_APP_NAME


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meshsection",
        description="Interactive cross-section and distance measurement viewer for triangle meshes.",
    )
    parser.add_argument("paths", nargs="*", help="Mesh files to open on startup (.stl, .ply, .obj, .vtk, .vtp)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    # Qt consumes its own options (-style, -platform, ...) from the rest
    args, qt_args = build_parser().parse_known_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # 2. Create the Qt Application
    app = QApplication([sys.argv[0], *qt_args])
    app.setApplicationName(VISIBLE_APP_NAME)

    # 3. Initialize the Data Model
    session = ViewerSession()

    # 4. Initialize the Main Window, passing the model
    window = MainWindow(session)
    window.show()

    if args.paths:
        window.load_files(args.paths)

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
