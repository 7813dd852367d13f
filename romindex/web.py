"""
Web API for romindex using Flask.
Serves the games browser, existence checks and background indexing.
"""

import logging
import os
import threading
from typing import Dict, List, Mapping, Optional

from flask import Flask, Response, jsonify, request

from . import __version__
from .archive_cache import ArchiveIndexCache
from .browser import GameBrowser
from .checker import FileChecker
from .errors import InvalidPathError, RomIndexError, UnknownSystemError
from .matcher import get_system_paths
from .models import System
from .monitor import monitor_action, setup_runtime_monitor, start_monitored_thread
from .scanner import FileScanner
from .settings import get_games_folders, load_settings
from .systems import SYSTEMS

logger = logging.getLogger(__name__)


def _text_error(message: str, status: int) -> Response:
    return Response(message, status=status, mimetype='text/plain')


def _error_status(e: Exception) -> int:
    if isinstance(e, InvalidPathError):
        return 400
    if isinstance(e, UnknownSystemError):
        return 404
    return 500


class IndexJob:
    """Background scan of every system folder, with progress for polling."""

    def __init__(self, scanner: FileScanner, games_folders: List[str],
                 catalog: Mapping[str, System]):
        self.scanner = scanner
        self.games_folders = games_folders
        self.catalog = catalog
        self._lock = threading.Lock()
        self._state = self._initial_state()
        self._thread: Optional[threading.Thread] = None

    @staticmethod
    def _initial_state() -> Dict:
        return {
            'running': False,
            'current_system': '',
            'current_path': '',
            'scanned_paths': 0,
            'total_paths': 0,
            'file_count': 0,
            'error': None,
            'files': [],
        }

    def status(self, include_files: bool = False) -> Dict:
        with self._lock:
            out = {k: v for k, v in self._state.items() if k != 'files'}
            if include_files:
                out['files'] = list(self._state['files'])
        return out

    def start(self, unique: bool = False) -> bool:
        """Start a scan; False if one is already running."""
        with self._lock:
            if self._state['running']:
                return False
            self._state = self._initial_state()
            self._state['running'] = True

        self._thread = start_monitored_thread(
            lambda: self._run(unique), name='romindex-index', logger=logger,
        )
        return True

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _on_progress(self, system_id: str, path: str) -> None:
        with self._lock:
            if self._state['current_path']:
                self._state['scanned_paths'] += 1
            self._state['current_system'] = system_id
            self._state['current_path'] = path
        logger.info("indexing %s: %s", system_id, path)

    def _run(self, unique: bool) -> None:
        try:
            system_paths = get_system_paths(self.games_folders, self.catalog)
            with self._lock:
                self._state['total_paths'] = sum(len(p) for p in system_paths.values())

            pairs = self.scanner.get_all_files(system_paths, self._on_progress)
            if unique:
                pairs = FileScanner.filter_unique_pairs(pairs)

            with self._lock:
                self._state['files'] = [{'system': s, 'path': p} for s, p in pairs]
                self._state['file_count'] = len(pairs)
                self._state['scanned_paths'] = self._state['total_paths']
        except (RomIndexError, OSError) as e:
            logger.error("index failed: %s", e)
            with self._lock:
                self._state['error'] = str(e)
        finally:
            with self._lock:
                self._state['running'] = False


def create_app(settings: Optional[Dict] = None,
               catalog: Optional[Mapping[str, System]] = None,
               cache: Optional[ArchiveIndexCache] = None) -> Flask:
    """Build the Flask app. The archive cache lives as long as the app."""
    settings = settings if settings is not None else load_settings()
    catalog = SYSTEMS if catalog is None else catalog
    cache = cache if cache is not None else ArchiveIndexCache()
    games_folders = get_games_folders(settings)

    browser = GameBrowser(games_folders, cache=cache, catalog=catalog)
    checker = FileChecker(cache)
    scanner = FileScanner(cache=cache, catalog=catalog)
    index_job = IndexJob(scanner, games_folders, catalog)

    app = Flask(__name__)
    app.extensions['romindex'] = {
        'settings': settings,
        'cache': cache,
        'browser': browser,
        'checker': checker,
        'scanner': scanner,
        'index_job': index_job,
    }

    def _read_path():
        raw = request.get_data(as_text=True).strip()
        if not raw or raw == 'null':
            data = {}
        else:
            data = request.get_json(force=True, silent=True)
            if data is None:
                return None, _text_error('invalid JSON body', 400)
        if not isinstance(data, dict):
            return None, _text_error('request body must be a JSON object', 400)
        path = data.get('path') or ''
        if not isinstance(path, str):
            return None, _text_error('path must be a string', 400)
        return path, None

    # ── Games API ──────────────────────────────────────────────

    @app.route('/api/games/list', methods=['POST'])
    def list_games_folder():
        """List one level of a games folder for the remote file picker."""
        path, error = _read_path()
        if error is not None:
            logger.error("error decoding request")
            return error

        logger.info("list games folder: %s", path or '<systems>')
        try:
            result = browser.list_games_folder(path)
        except (RomIndexError, OSError) as e:
            logger.error("error listing path %s: %s", path, e)
            return _text_error(str(e), _error_status(e))

        return jsonify(result.to_dict())

    @app.route('/api/games/exists', methods=['POST'])
    def game_exists():
        path, error = _read_path()
        if error is not None:
            return error
        return jsonify({'path': path, 'exists': bool(path) and checker.exists(path)})

    @app.route('/api/games/index', methods=['POST'])
    def start_index():
        data = request.get_json(silent=True) or {}
        unique = bool(data.get('unique', False)) if isinstance(data, dict) else False
        if not index_job.start(unique=unique):
            return _text_error('index already in progress', 409)
        monitor_action(f"index started (unique={unique})", logger=logger)
        return jsonify({'success': True, 'message': 'Index started'})

    @app.route('/api/games/index', methods=['GET'])
    def index_status():
        include_files = request.args.get('files', '').lower() in ('1', 'true', 'yes')
        return jsonify(index_job.status(include_files=include_files))

    @app.route('/api/systems')
    def list_systems():
        return jsonify({'systems': [s.to_dict() for s in catalog.values()]})

    @app.route('/api/health')
    def health():
        return jsonify({'status': 'ok', 'version': __version__})

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None,
               settings: Optional[Dict] = None, debug: bool = False):
    """Run the web server"""
    settings = settings if settings is not None else load_settings()
    log_settings = settings.get('logging', {})
    logger_ = setup_runtime_monitor(log_dir=log_settings.get('dir'),
                                    echo=log_settings.get('echo', False))
    host = host or settings.get('web', {}).get('host', '127.0.0.1')
    port = int(port or settings.get('web', {}).get('port', 8182))
    monitor_action(f"run_server called: host={host} port={port} debug={debug}", logger=logger_)

    for folder in get_games_folders(settings):
        if os.path.isdir(folder):
            logger_.info("games folder: %s", folder)

    print(f"romindex {__version__} - Web API")
    print("=" * 50)
    print(f"Listening on: http://{host}:{port}")
    print("Press Ctrl+C to stop")
    print()

    app = create_app(settings)
    app.run(host=host, port=port, debug=debug, threaded=True)
