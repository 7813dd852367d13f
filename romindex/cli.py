"""
Command-line interface for romindex
"""

import argparse
import json
import logging
import sys

from . import __version__
from .archive_cache import ArchiveIndexCache
from .browser import GameBrowser
from .checker import FileChecker
from .errors import RomIndexError
from .matcher import get_system_paths
from .monitor import log_event, setup_runtime_monitor
from .scanner import FileScanner
from .settings import get_games_folders, load_settings
from .systems import SYSTEMS, lookup_system


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser"""
    parser = argparse.ArgumentParser(
        prog='romindex',
        description='ROM indexer - find and browse games in folders and zip files',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  %(prog)s --systems
  %(prog)s --list ""
  %(prog)s --list /media/fat/games/NES
  %(prog)s --scan NES /media/fat/games/NES
  %(prog)s --scan-all --unique --json
  %(prog)s --exists "/media/fat/games/NES/pack.zip/Contra (USA).nes"
  %(prog)s --web --port 8182
        '''
    )

    parser.add_argument('--web', action='store_true', help='Start the web API')
    parser.add_argument('--host', type=str, help='Web API host')
    parser.add_argument('--port', type=int, help='Web API port')

    ops = parser.add_argument_group('Operations')
    ops.add_argument('--systems', action='store_true', help='List supported systems')
    ops.add_argument(
        '--list', '-l',
        type=str,
        metavar='PATH',
        help='List one level of a games folder ("" lists system folders)'
    )
    ops.add_argument(
        '--scan', '-s',
        type=str,
        metavar='SYSTEM',
        help='Scan PATHS (or every folder of SYSTEM) for games of SYSTEM'
    )
    ops.add_argument(
        '--scan-all',
        action='store_true',
        help='Scan every system folder under the games folders'
    )
    ops.add_argument(
        '--exists',
        type=str,
        metavar='PATH',
        help='Check whether a file exists, including files inside zip archives'
    )
    ops.add_argument('paths', nargs='*', help='Folders to scan with --scan')

    opts = parser.add_argument_group('Options')
    opts.add_argument('--unique', action='store_true',
                      help='Drop scan results whose file name was already seen')
    opts.add_argument('--games-folder', '-g', type=str, action='append',
                      help='Games folder to search (repeatable, overrides settings)')
    opts.add_argument('--settings', type=str, help='Settings JSON file')
    opts.add_argument('--json', action='store_true', help='Print results as JSON')
    opts.add_argument('--quiet', '-q', action='store_true', help='Suppress progress output')
    opts.add_argument('--monitor', action='store_true', help='Echo log events to stderr')
    opts.add_argument('--log-file', type=str, help='Custom log file path')

    parser.add_argument(
        '--version', '-v',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def run_cli(args=None):
    """Run the CLI"""
    parser = create_parser()
    args = parser.parse_args(args)

    settings = load_settings(args.settings)
    if args.games_folder:
        settings['games_folders'] = list(args.games_folder)

    log_settings = settings.get('logging', {})
    setup_runtime_monitor(
        log_file=args.log_file,
        log_dir=log_settings.get('dir'),
        echo=args.monitor or log_settings.get('echo', False),
    )
    log_event('cli.start', 'CLI execution started')

    if args.web:
        from .web import run_server
        run_server(args.host, args.port, settings)
        return 0

    if not (args.systems or args.list is not None or args.scan
            or args.scan_all or args.exists is not None):
        parser.print_help()
        return 1

    quiet = args.quiet or args.json

    def log(msg):
        if not quiet:
            print(msg)

    cache = ArchiveIndexCache()
    games_folders = get_games_folders(settings)

    try:
        if args.systems:
            return _systems_mode(args)
        if args.list is not None:
            return _list_mode(args, GameBrowser(games_folders, cache=cache))
        if args.exists is not None:
            return _exists_mode(args, FileChecker(cache))
        return _scan_mode(args, FileScanner(cache=cache), games_folders, log)
    except (RomIndexError, OSError) as e:
        log_event('cli.error', str(e), logging.ERROR)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _systems_mode(args):
    systems = [s.to_dict() for s in SYSTEMS.values()]
    if args.json:
        print(json.dumps(systems, indent=2))
        return 0
    for s in systems:
        print(f"{s['id']:<18} {s['name']:<20} {', '.join(s['extensions'])}")
    return 0


def _human_size(size):
    value = float(size)
    for unit in ('B', 'K', 'M', 'G'):
        if value < 1024 or unit == 'G':
            break
        value /= 1024
    return f"{int(value)} {unit}" if unit == 'B' else f"{value:.1f}{unit}"


def _list_mode(args, browser):
    result = browser.list_games_folder(args.list)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    if result.up is not None:
        print(f"up: {result.up or '<systems>'}")
    for item in result.items:
        if item.next is not None:
            print(f"  [dir]  {item.filename}")
        else:
            print(f"  {_human_size(item.size):>9}  {item.filename}")
    return 0


def _exists_mode(args, checker):
    found = checker.exists(args.exists)
    if args.json:
        print(json.dumps({'path': args.exists, 'exists': found}))
    else:
        print('yes' if found else 'no')
    return 0 if found else 1


def _scan_mode(args, scanner, games_folders, log):
    if args.scan:
        system = lookup_system(args.scan)
        paths = args.paths or get_system_paths(games_folders).get(system.id, [])
        system_paths = {system.id: paths}
    else:
        system_paths = get_system_paths(games_folders)

    def status(system_id, path):
        log(f"Scanning {system_id}: {path}")

    log_event('scan.start', f'Scanning {sum(len(p) for p in system_paths.values())} folders')
    pairs = scanner.get_all_files(system_paths, status)

    if args.unique:
        pairs = FileScanner.filter_unique_pairs(pairs)

    log_event('scan.done', f'Found {len(pairs)} files')

    if args.json:
        print(json.dumps([{'system': s, 'path': p} for s, p in pairs], indent=2))
        return 0

    for system_id, path in pairs:
        print(f"{system_id}\t{path}")
    log(f"\nFound {len(pairs):,} files")
    return 0
