import sys
import threading
import time

from ..config import PROGRESS_INTERVAL

BAR_WIDTH = 40
LINE_WIDTH = 120


def format_duration(seconds):
    """Formats seconds like '1h2m3s', '4m5s' or '6s'."""
    seconds = int(round(max(seconds, 0)))
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


class ProgressState:
    """
    Counters shared by all workers. Increments go through a lock; readers
    (the tracker) read the attributes directly and never take the lock.
    """

    def __init__(self, total, clock=time.monotonic):
        self.total = total
        self.completed = 0
        self.resolved = 0
        self.alive = 0
        self.clock = clock
        self.started_at = clock()
        self._lock = threading.Lock()

    def mark_completed(self):
        with self._lock:
            if self.completed < self.total:
                self.completed += 1

    def mark_resolved(self):
        with self._lock:
            self.resolved += 1

    def mark_alive(self):
        with self._lock:
            self.alive += 1

    def elapsed(self):
        return self.clock() - self.started_at


class ProgressTracker:
    """Redraws a one-line status (percentage, rate, ETA) on a fixed interval."""

    def __init__(self, state, interval=PROGRESS_INTERVAL, stream=None):
        self.state = state
        self.interval = interval
        self.stream = stream if stream is not None else sys.stdout
        self._stop_event = threading.Event()
        self._write_lock = threading.Lock()
        self._thread = None

    def render(self):
        state = self.state
        completed = state.completed
        total = state.total
        alive = state.alive
        elapsed = state.elapsed()

        percentage = (completed / total * 100) if total else 100.0
        rate = completed / elapsed if elapsed > 0 else 0.0
        eta = (total - completed) / rate if rate > 0 else 0.0

        filled = int(BAR_WIDTH * percentage / 100)
        bar = '█' * filled + '▒' * (BAR_WIDTH - filled)
        return (f"[{bar}] {percentage:.1f}% ({completed}/{total}) | Alive: {alive} | "
                f"{rate:.1f}/s | ETA: {format_duration(eta)} | Elapsed: {format_duration(elapsed)}")

    def display(self):
        with self._write_lock:
            self.stream.write('\r' + self.render())
            self.stream.flush()

    def _blank(self):
        self.stream.write('\r' + ' ' * LINE_WIDTH + '\r')
        self.stream.flush()

    def clear(self):
        """Blanks the status line so other output is not drawn over it."""
        with self._write_lock:
            self._blank()

    def announce(self, emit, message):
        """Blanks the status line and emits a message without a redraw in between."""
        with self._write_lock:
            self._blank()
            emit(message)

    def _run(self):
        while not self._stop_event.wait(self.interval):
            self.display()

    def start(self):
        self._thread = threading.Thread(target=self._run, name="subsplice-progress", daemon=True)
        self._thread.start()
        return self

    def stop(self):
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self.display()
        with self._write_lock:
            self.stream.write('\n')
            self.stream.flush()

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
