"""
dockpages - A keyboard-driven Terminal User Interface (TUI) for Docker resources.

Each resource type (containers, images, volumes, networks) is shown as a
scrollable, selectable page. Destructive operations go through a confirmation
dialog before anything reaches the daemon; start/stop/attach run directly.

Main Components:
  - selection.py: Selection list controller (snapshot + selection index)
  - dialog.py: Generic confirmation dialog state machine
  - executor.py: Runs one backend action at a time per page
  - page.py: Page dispatcher routing keys to the dialog or the list
  - pages.py: Page definitions for each resource kind
  - host.py: Multiplexes pages behind one update() contract
  - backend.py: Docker SDK wrapper translating errors to errors.py
  - textual_app.py: Textual front end

Usage:
  python -m dockpages

Dependencies:
  - docker>=7.0.0
  - textual, rich
  - PyYAML (configuration)
  - Python 3.10+
"""

import os
from pathlib import Path

__version__ = "0.1.0"


def get_log_path() -> str:
    """
    Get the log file path following XDG Base Directory spec.

    Returns XDG_DATA_HOME/dockpages/logs/dockpages.log with fallback to /tmp.
    Creates directory if it doesn't exist.

    Returns:
        str: Absolute path to log file (/tmp/dockpages.log as fallback)
    """
    xdg_data_home = os.environ.get('XDG_DATA_HOME')
    if not xdg_data_home:
        xdg_data_home = Path.home() / '.local' / 'share'
    else:
        xdg_data_home = Path(xdg_data_home)

    log_dir = xdg_data_home / 'dockpages' / 'logs'

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        return str(log_dir / 'dockpages.log')
    except (PermissionError, OSError):
        return '/tmp/dockpages.log'
