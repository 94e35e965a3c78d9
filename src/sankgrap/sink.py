import threading


class ResultSink:
    """Deduplicating set shared by all workers. Every access holds one lock."""

    def __init__(self):
        self._results = {}
        self._lock = threading.Lock()

    def merge(self, matches):
        added = 0
        with self._lock:
            for match in matches:
                if match not in self._results:
                    self._results[match] = True
                    added += 1
        return added

    def snapshot(self):
        with self._lock:
            return set(self._results)

    def __len__(self):
        with self._lock:
            return len(self._results)

    def __contains__(self, match):
        with self._lock:
            return match in self._results


class ProgressCounter:
    """
    Counts attempted URLs. Uses its own lock, separate from the ResultSink,
    and optionally forwards every tick to a callback (e.g. ``tqdm.update``).
    """

    def __init__(self, total, callback=None):
        self.total = total
        self.callback = callback
        self.attempted = 0
        self.failed = 0
        self.skipped = 0
        self._lock = threading.Lock()

    def tick(self, failed=False, skipped=False):
        with self._lock:
            self.attempted += 1
            if failed:
                self.failed += 1
            elif skipped:
                self.skipped += 1
            if self.callback:
                self.callback(1)

    @property
    def fetched(self):
        with self._lock:
            return self.attempted - self.failed
