"""
Shared configuration between the CLI and the web server.
"""

import os

# Games folders searched for per-system subfolders, in priority order
DEFAULT_GAMES_FOLDERS = [
    '/media/fat',
    '/media/usb0',
    '/media/usb1',
    '/media/usb2',
    '/media/usb3',
    '/media/usb4',
    '/media/usb5',
    '/media/fat/cifs',
    '/media/network',
]

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 8182

APP_DATA_DIR = os.path.expanduser(os.environ.get('ROMINDEX_HOME', '~/.romindex'))
LOGS_DIR = os.path.join(APP_DATA_DIR, 'logs')
SETTINGS_FILE = os.path.join(APP_DATA_DIR, 'settings.json')


def ensure_app_directories(*paths: str) -> None:
    """Create the given directories, or the app-local ones when none are given."""
    for path in paths or (APP_DATA_DIR, LOGS_DIR):
        os.makedirs(path, exist_ok=True)
