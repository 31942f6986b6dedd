import logging
import queue
import threading
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, as_completed, wait

from .config import SHORT_DOMAIN_SKIP, RunConfig
from .models import ProbeOutcome, RunStats
from .phases.generation import APEX_LABELS, count_candidates, expand, split_labels
from .phases.probing import DNSGate, LivenessProbe, check_candidate
from .utils.dns_utils import build_resolver
from .utils.http_utils import build_session
from .utils.progress import ProgressState, ProgressTracker

# Pending futures kept per worker while streaming candidates into the pool
SUBMIT_BACKLOG_FACTOR = 4


class ResultCollector:
    """Accumulates alive outcomes as workers finish. Safe to feed from any thread."""

    def __init__(self, state=None, tracker=None, logger=None):
        self.state = state
        self.tracker = tracker
        self.logger = logger or logging.getLogger(__name__)
        self._queue = queue.Queue()
        self._outcomes = []
        self._lock = threading.Lock()

    def add(self, outcome):
        if self.state is not None and outcome.resolved:
            self.state.mark_resolved()
        if not outcome.alive:
            return
        self._queue.put(outcome)
        if self.state is not None:
            self.state.mark_alive()
        message = f" [+] ONLINE: {outcome.hostname} ({outcome.status_code})"
        if self.tracker is not None:
            self.tracker.announce(self.logger.info, message)
        else:
            self.logger.info(message)

    def results(self):
        """Everything collected so far, in arrival order. Repeated calls return the same outcomes."""
        with self._lock:
            while True:
                try:
                    self._outcomes.append(self._queue.get_nowait())
                except queue.Empty:
                    break
            return list(self._outcomes)

    def hostnames(self):
        return [outcome.hostname for outcome in self.results()]

    def __len__(self):
        return len(self.results())


class WorkerPool:
    """
    Runs a task over every candidate with at most ``max_workers`` running at once.
    Candidates are pulled from the iterable lazily, so generators of any size work.
    """

    def __init__(self, max_workers, state=None, logger=None):
        self.max_workers = max_workers
        self.state = state
        self.logger = logger or logging.getLogger(__name__)

    def _execute(self, task, candidate):
        try:
            return task(candidate)
        finally:
            if self.state is not None:
                self.state.mark_completed()

    def _finish(self, future, candidate, on_result):
        try:
            outcome = future.result()
        except Exception as e:
            self.logger.error(f" [!] Unexpected error while checking {candidate.hostname}: {type(e).__name__} - {e}")
            outcome = ProbeOutcome(candidate=candidate)
        on_result(outcome)

    def run(self, candidates, task, on_result):
        backlog = self.max_workers * SUBMIT_BACKLOG_FACTOR
        pending = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            try:
                for candidate in candidates:
                    if len(pending) >= backlog:
                        done, _ = wait(pending, return_when=FIRST_COMPLETED)
                        for future in done:
                            self._finish(future, pending.pop(future), on_result)
                    future = executor.submit(self._execute, task, candidate)
                    pending[future] = candidate

                for future in as_completed(list(pending)):
                    self._finish(future, pending.pop(future), on_result)
            except KeyboardInterrupt:
                # Only in-flight chains are waited for on the way out
                for future in pending:
                    future.cancel()
                raise


class SubdomainSplicer:
    """
    Splices every word between the labels of every domain, then keeps the
    candidates that resolve and answer over HTTPS or HTTP.
    """

    def __init__(self, domains, words, config=None, logger=None, resolver=None, session=None, progress_stream=None):
        self.config = (config or RunConfig()).validate()
        self.domains = list(domains)
        self.words = list(words)
        self.logger = logger or logging.getLogger(__name__)
        self.resolver = resolver
        self.session = session
        self.progress_stream = progress_stream
        self.stats = None

    def candidates(self):
        return expand(self.domains, self.words, self.config.short_domain_policy)

    def total_candidates(self):
        return count_candidates(self.domains, self.words, self.config.short_domain_policy)

    def _report_short_domains(self):
        for domain in self.domains:
            if len(split_labels(domain)) <= APEX_LABELS:
                if self.config.short_domain_policy == SHORT_DOMAIN_SKIP:
                    self.logger.warning(f" [!] {domain} has no label to splice into, skipping.")
                else:
                    self.logger.debug(f" [.] {domain} is too short, prepending words instead.")

    def run(self):
        """Runs the whole pipeline and returns the alive hostnames."""
        config = self.config
        total = self.total_candidates()
        self.logger.info(f"[*] Loaded {len(self.words)} words for {len(self.domains)} domain(s)")
        self._report_short_domains()

        if config.debug:
            for candidate in self.candidates():
                self.logger.debug(f" [.] Generated: {candidate.hostname}")
            self.logger.info(f"[*] Generated {total} subdomains (debug mode, skipping checks)")
            self.stats = RunStats(total=total, completed=0, resolved=0, alive=0, elapsed=0.0)
            return []

        owns_session = self.session is None
        resolver = self.resolver or build_resolver(config.dns_timeout, config.nameservers, logger=self.logger)
        session = self.session or build_session()
        dns_gate = DNSGate(resolver, logger=self.logger)
        liveness_probe = LivenessProbe(session, timeout=config.timeout, alive_policy=config.alive_policy,
                                       logger=self.logger)

        self.logger.info(f"[*] Checking {total} subdomains with {config.workers} workers...")
        state = ProgressState(total)
        tracker = ProgressTracker(state, stream=self.progress_stream) if config.show_progress else None
        collector = ResultCollector(state=state, tracker=tracker, logger=self.logger)
        pool = WorkerPool(config.workers, state=state, logger=self.logger)

        if tracker is not None:
            tracker.start()
        try:
            pool.run(self.candidates(),
                     lambda candidate: check_candidate(candidate, dns_gate, liveness_probe),
                     collector.add)
        finally:
            if tracker is not None:
                tracker.stop()
            if owns_session:
                session.close()

        alive = collector.hostnames()
        self.stats = RunStats(total=total, completed=state.completed, resolved=state.resolved,
                              alive=len(alive), elapsed=state.elapsed())
        self.logger.info(f"[*] Checked {state.completed}/{total} subdomains, {state.resolved} resolved, "
                         f"{len(alive)} alive.")
        return alive
