import logging
import os
import tempfile

from romindex.monitor import (
    LOGGER_NAME,
    log_event,
    setup_runtime_monitor,
    shutdown_runtime_monitor,
    start_monitored_thread,
)


def _flush(logger):
    for h in logger.handlers:
        h.flush()


def test_monitor_writes_event_to_file():
    with tempfile.TemporaryDirectory() as tmp:
        logfile = os.path.join(tmp, 'events.log')

        logger = setup_runtime_monitor(log_file=logfile)
        log_event('test.event', 'monitor alive')
        _flush(logger)

        with open(logfile, 'r', encoding='utf-8') as f:
            content = f.read()

        assert 'test.event | monitor alive' in content
        assert 'Runtime monitor initialized' in content
        shutdown_runtime_monitor()


def test_module_loggers_reach_monitor_file():
    with tempfile.TemporaryDirectory() as tmp:
        logfile = os.path.join(tmp, 'events.log')
        logger = setup_runtime_monitor(log_file=logfile)

        logging.getLogger('romindex.scanner').info('scanning somewhere')
        _flush(logger)

        with open(logfile, 'r', encoding='utf-8') as f:
            assert 'scanning somewhere' in f.read()
        shutdown_runtime_monitor()


def test_setup_is_idempotent_until_shutdown():
    with tempfile.TemporaryDirectory() as tmp:
        first = setup_runtime_monitor(log_file=os.path.join(tmp, 'a.log'))
        handlers = list(first.handlers)
        second = setup_runtime_monitor(log_file=os.path.join(tmp, 'b.log'))

        assert first is second
        assert second.handlers == handlers
        assert not os.path.exists(os.path.join(tmp, 'b.log'))

        shutdown_runtime_monitor()
        assert logging.getLogger(LOGGER_NAME).handlers == []


def test_monitored_thread_logs_start_and_end():
    with tempfile.TemporaryDirectory() as tmp:
        logfile = os.path.join(tmp, 'events.log')
        logger = setup_runtime_monitor(log_file=logfile)
        ran = []

        th = start_monitored_thread(lambda: ran.append(True), name='unit-worker')
        th.join(5)
        _flush(logger)

        with open(logfile, 'r', encoding='utf-8') as f:
            content = f.read()
        assert ran == [True]
        assert 'thread start: unit-worker' in content
        assert 'thread end: unit-worker' in content
        shutdown_runtime_monitor()
