"""
Watch mode: rebuild documentation when source files change.
"""

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

REBUILD_EVENTS = frozenset(['created', 'modified', 'deleted', 'moved'])


class RebuildEventHandler(FileSystemEventHandler):
    """
    Calls ``rebuild`` once source changes have been quiet for ``delay`` seconds.

    Each event restarts the countdown, so a burst of saves produces a single
    rebuild that sees the last of them. Hidden files and directories (editor
    swap files, .git) are ignored.
    """

    def __init__(self, rebuild: Callable[[], object], root: Union[str, Path, None] = None,
                 delay: float = 0.5, timer_factory: Callable[..., threading.Timer] = threading.Timer):
        self.rebuild = rebuild
        self.root = Path(root).resolve() if root else None
        self.delay = delay
        self.timer_factory = timer_factory
        self._timer = None
        self._lock = threading.Lock()
        self._build_lock = threading.Lock()

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in REBUILD_EVENTS:
            return
        if is_hidden(event.src_path, self.root):
            return

        logger.debug(f"Change detected in {event.src_path}")
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self.timer_factory(self.delay, self._run_rebuild)
            self._timer.daemon = True
            self._timer.start()

    def _run_rebuild(self) -> None:
        with self._lock:
            if self._timer is threading.current_thread():
                self._timer = None

        logger.info("Sources changed, rebuilding...")
        with self._build_lock:
            try:
                self.rebuild()
            except Exception as e:
                logger.error(f"Rebuild failed: {e}")


def is_hidden(path: Union[str, Path], root: Union[str, Path, None] = None) -> bool:
    """True if any component of ``path`` below ``root`` starts with a dot."""
    path = Path(path)
    if root is not None:
        try:
            path = path.resolve().relative_to(root)
        except ValueError:
            pass
    return any(part.startswith('.') and part not in ('.', '..') for part in path.parts)


def start_watcher(input_dir: Union[str, Path], rebuild: Callable[[], object],
                  delay: float = 0.5) -> Observer:
    """Start a background observer on ``input_dir``; the caller stops it."""
    observer = Observer()
    observer.schedule(RebuildEventHandler(rebuild, root=input_dir, delay=delay),
                      str(input_dir), recursive=True)
    observer.start()
    logger.info(f"Watching {input_dir} for changes...")
    return observer


def watch(input_dir: Union[str, Path], rebuild: Callable[[], object], delay: float = 0.5) -> None:
    """Block and rebuild on changes until interrupted."""
    observer = start_watcher(input_dir, rebuild, delay)
    try:
        while observer.is_alive():
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Stopping watcher")
    finally:
        observer.stop()
        observer.join()
