from .config import logger, DEFAULT_TIMEOUT, DEFAULT_WORKERS, USER_AGENT
from .errors import ConfigurationError, FetchError
from .extractor import Mode, extract
from .sink import ResultSink, ProgressCounter
from .utils.http_utils import get_session, fetch

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
import functools
import queue
import threading

_STOP = object()


class PoolState(Enum):
    IDLE = 'idle'
    FILLING = 'filling'
    DRAINING = 'draining'
    DONE = 'done'


@dataclass
class UrlOutcome:
    url: str
    matches: set = field(default_factory=set)
    error: Exception = None
    skipped: bool = False

    @property
    def failed(self):
        return self.error is not None


class WorkerPool:
    """
    Fetches URLs on a fixed number of threads and collects every subdomain
    match into one ResultSink.

    Each worker owns its own requests session. A failing URL only affects
    itself: it is logged at debug level, counted, and the worker moves on.
    """

    def __init__(self, matcher, concurrency=DEFAULT_WORKERS, mode=Mode.BOTH, timeout=DEFAULT_TIMEOUT,
                 session_factory=None, progress_callback=None, only_ok=False, user_agent=USER_AGENT):
        if not isinstance(concurrency, int) or isinstance(concurrency, bool) or concurrency < 1:
            raise ConfigurationError(f"Concurrency must be a positive integer, got {concurrency!r}")
        self.matcher = matcher
        self.concurrency = concurrency
        self.mode = Mode.parse(mode)
        self.timeout = timeout
        self.session_factory = session_factory or functools.partial(get_session, user_agent)
        self.progress_callback = progress_callback
        self.only_ok = only_ok

        self.sink = ResultSink()
        self.progress = None
        self.state = PoolState.IDLE
        self._cancelled = threading.Event()
        self._url_queue = None

    def cancel(self):
        """Stops the workers after the URLs they are currently fetching."""
        self._cancelled.set()

    @property
    def cancelled(self):
        return self._cancelled.is_set()

    @property
    def stats(self):
        if self.progress is None:
            return {'attempted': 0, 'fetched': 0, 'failed': 0, 'skipped': 0, 'unique_matches': 0}
        return {
            'attempted': self.progress.attempted,
            'fetched': self.progress.fetched,
            'failed': self.progress.failed,
            'skipped': self.progress.skipped,
            'unique_matches': len(self.sink),
        }

    def run(self, urls):
        if self.state is not PoolState.IDLE:
            raise RuntimeError("WorkerPool.run() can only be called once")

        urls = list(urls)
        self.state = PoolState.FILLING
        self.progress = ProgressCounter(len(urls), callback=self.progress_callback)
        self._url_queue = queue.Queue(maxsize=len(urls) + self.concurrency)
        for url in urls:
            self._url_queue.put(url)
        for _ in range(self.concurrency):
            self._url_queue.put(_STOP)

        self.state = PoolState.DRAINING
        logger.info(f"[*] Processing {len(urls)} URLs with {self.concurrency} workers (mode: {self.mode.value})...")
        with ThreadPoolExecutor(max_workers=self.concurrency) as executor:
            futures = [executor.submit(self._worker) for _ in range(self.concurrency)]
            try:
                for future in as_completed(futures):
                    future.result()
            except KeyboardInterrupt:
                logger.warning("[!] Interrupted. Letting workers finish their current URLs...")
                self.cancel()
                raise

        self.state = PoolState.DONE
        stats = self.stats
        logger.info(f"[*] Done. Attempted: {stats['attempted']}/{len(urls)}, fetched: {stats['fetched']}, "
                    f"failed: {stats['failed']}, unique matches: {stats['unique_matches']}.")
        return self.sink.snapshot()

    def _worker(self):
        session = self.session_factory()
        try:
            while True:
                url = self._url_queue.get()
                if url is _STOP:
                    return
                if self._cancelled.is_set():
                    continue
                outcome = self._process_url(session, url)
                self._record(outcome)
        finally:
            session.close()

    def _process_url(self, session, url):
        logger.debug(f" [.] Processing: {url}")
        try:
            view = fetch(session, url, timeout=self.timeout)
            if view.body_error is not None:
                logger.debug(f" [!] Incomplete body for {url}: {view.body_error}")
            if self.only_ok and not view.ok:
                return UrlOutcome(url=url, skipped=True)
            return UrlOutcome(url=url, matches=extract(view, self.matcher, self.mode))
        except FetchError as e:
            return UrlOutcome(url=url, error=e)
        except Exception as e:
            logger.exception(f" [!] Unexpected error while processing {url}")
            return UrlOutcome(url=url, error=e)

    def _record(self, outcome):
        if outcome.failed:
            logger.debug(f" [!] Failed to fetch {outcome.url}: {outcome.error}")
        elif outcome.skipped:
            logger.debug(f" [.] Skipped {outcome.url}: non-200 status")
        else:
            new = self.sink.merge(outcome.matches)
            logger.debug(f" [+] Fetched {outcome.url}: {len(outcome.matches)} matches ({new} new)")
        self.progress.tick(failed=outcome.failed, skipped=outcome.skipped)


def grab(urls, matcher, concurrency=DEFAULT_WORKERS, mode=Mode.BOTH, **kwargs):
    """Runs a one-shot WorkerPool over ``urls`` and returns the match set."""
    return WorkerPool(matcher, concurrency=concurrency, mode=mode, **kwargs).run(urls)
