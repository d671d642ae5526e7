"""Inbox watcher: process OCR text dumps as they arrive."""

import threading
import time
from pathlib import Path
from typing import Callable

from rich.console import Console
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .processor import SUPPORTED_EXTENSIONS

console = Console()


class InboxHandler(FileSystemEventHandler):
    """Queues OCR text files dropped into the inbox and hands them over in batches.

    Moves are followed to their destination. Dotfiles are never queued.
    A batch is released once no new file has arrived for ``debounce`` seconds.
    """

    def __init__(self, on_batch: Callable[[list[str]], object] | None = None, debounce: float = 2.0):
        super().__init__()
        self._queue: dict[Path, None] = {}
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._debounce = debounce
        self._on_batch = on_batch

    @staticmethod
    def accepts(path: str | Path) -> bool:
        path = Path(path)
        return not path.name.startswith(".") and path.suffix.lower() in SUPPORTED_EXTENSIONS

    def on_created(self, event):
        if not event.is_directory:
            self.enqueue(event.src_path)

    def on_modified(self, event):
        if not event.is_directory:
            self.enqueue(event.src_path)

    def on_moved(self, event):
        if not event.is_directory:
            self.enqueue(event.dest_path)

    def enqueue(self, path: str | Path) -> bool:
        if not self.accepts(path):
            return False
        path = Path(path)
        with self._lock:
            if path not in self._queue:
                console.print(f"  [dim]Detected: {path.name}[/]")
            self._queue[path] = None
            if self._timer:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce, self._release)
            self._timer.daemon = True
            self._timer.start()
        return True

    def flush(self) -> list[str]:
        """Take every queued path, in arrival order, and cancel the pending timer."""
        with self._lock:
            if self._timer:
                self._timer.cancel()
                self._timer = None
            paths = [str(p) for p in self._queue]
            self._queue.clear()
        return paths

    def _release(self):
        paths = self.flush()
        if paths and self._on_batch:
            self._on_batch(paths)


class InboxWatcher:
    """Watches the inbox directory and stores a result for each new file."""

    def __init__(self, config: dict, debounce: float = 2.0):
        from .config import get_thresholds, load_keywords
        from .storage import get_repository

        self.config = config
        self.inbox_path = Path(config["inbox_path"])
        self.keywords = load_keywords(config.get("keywords_path"))
        self.thresholds = get_thresholds(config)
        self.repository = get_repository(config)
        self.handler = InboxHandler(self.process_batch, debounce=debounce)
        self.observer = Observer()

    def process_batch(self, paths: list[str]) -> int:
        """Process a batch of detected files. Returns the number stored."""
        from .processor import process_file, store_result

        console.print(f"\n[bold blue]Processing {len(paths)} file(s)...[/]")
        stored = 0
        for p in sorted(paths):
            name = Path(p).name
            try:
                outcome = process_file(Path(p), self.config, self.keywords)
            except OSError as e:
                console.print(f"  [red]✗ Failed to read {name}: {e}[/]")
                continue
            if outcome is None:
                continue
            if outcome.is_err():
                console.print(f"  [red]✗ {name}: {outcome.error.message}[/]")
                continue
            saved = store_result(self.repository, outcome.value, self.thresholds)
            if saved.is_err():
                console.print(f"  [red]✗ {name}: {saved.error.message}[/]")
                continue
            stored += 1
            console.print(
                f"  [green]✓ {name}: {outcome.value.processing_status}, "
                f"{len(saved.value)} activity(ies) approved[/]"
            )

        console.print("[bold green]✓ Batch complete![/]\n")
        return stored

    def run(self):
        """Start watching (blocks until Ctrl+C)."""
        self.inbox_path.mkdir(parents=True, exist_ok=True)
        self.observer.schedule(self.handler, str(self.inbox_path), recursive=True)
        self.observer.start()

        console.print(f"[bold]Watching {self.inbox_path} for OCR text... (Ctrl+C to stop)[/]")

        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Stopping watcher...[/]")
            self.observer.stop()
        self.observer.join()
        console.print("[green]✓ Watcher stopped.[/]")
