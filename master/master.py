import queue
import threading
import time
from dataclasses import dataclass, field
from typing import List

from master.discovery import iter_candidates
from master.request import SplitRequest
from worker.worker import DONE, FAILED, SKIPPED, FileReport, process_file


# -----------------------------
# Global job state (lives with app)
# -----------------------------

JOB_STATUS = {}
JOB_START_TIME = {}
JOB_END_TIME = {}
JOB_REPORTS = {}


@dataclass
class BatchReport:
    files: List[FileReport] = field(default_factory=list)

    @property
    def files_seen(self) -> int:
        return len(self.files)

    @property
    def files_split(self) -> int:
        return sum(1 for f in self.files if f.state == DONE)

    @property
    def files_skipped(self) -> int:
        return sum(1 for f in self.files if f.state == SKIPPED)

    @property
    def files_failed(self) -> int:
        return sum(1 for f in self.files if f.state == FAILED)

    @property
    def tiles_written(self) -> int:
        return sum(f.tiles_written for f in self.files)

    @property
    def tiles_skipped(self) -> int:
        return sum(f.tiles_skipped for f in self.files)

    def summary(self) -> str:
        return (
            f"{self.files_split} of {self.files_seen} files split, "
            f"{self.tiles_written} tiles written, {self.tiles_skipped} skipped"
        )


class BatchRunner:
    """
    Fans the files of a request out over a pool of worker threads.

    Each file is one unit of work pulled from a queue. Nothing is shared
    between units except the read-only request and the report, which is
    guarded by a lock.
    """

    def __init__(self, request: SplitRequest, tile_workers: int = 1, verbose: bool = False):
        self.request = request
        self.tile_workers = tile_workers
        self.verbose = verbose

        self.tasks = queue.Queue()
        self.report = BatchReport()
        self.lock = threading.Lock()

    def _log(self, message):
        if self.verbose:
            print(f"[MASTER] {message}")

    def _worker_loop(self):
        while True:
            path = self.tasks.get()
            try:
                if path is None:
                    return
                self._run_one(path)
            finally:
                self.tasks.task_done()

    def _run_one(self, path):
        try:
            file_report = process_file(
                path, self.request, tile_workers=self.tile_workers, verbose=self.verbose
            )
        except Exception as e:
            # a bug in one file's pipeline must not take the batch down
            print(f"[MASTER] {path} failed: {e}")
            file_report = FileReport(path=path, state=FAILED, errors=[str(e)])

        with self.lock:
            self.report.files.append(file_report)

    def run(self) -> BatchReport:
        candidates = iter_candidates(
            self.request.source,
            recursive=self.request.recursive,
            exclude=self.request.output_dir,
        )

        workers = max(1, self.request.workers)
        if workers == 1:
            for path in candidates:
                self._run_one(path)
            return self.report

        threads = [
            threading.Thread(target=self._worker_loop, name=f"splix-worker-{i}")
            for i in range(workers)
        ]
        for thread in threads:
            thread.start()

        queued = 0
        try:
            for path in candidates:
                self.tasks.put(path)
                queued += 1
        finally:
            for _ in threads:
                self.tasks.put(None)
            for thread in threads:
                thread.join()

        self._log(f"Processed {queued} candidate files with {workers} workers")
        return self.report


def run_split(request: SplitRequest, tile_workers: int = 1, verbose: bool = False) -> BatchReport:
    return BatchRunner(request, tile_workers=tile_workers, verbose=verbose).run()


# -----------------------------
# Background jobs
# -----------------------------

def run_job(request: SplitRequest, job_id):
    """
    Runs a split job. Runs in background thread.
    """
    try:
        report = run_split(request)
        JOB_REPORTS[job_id] = report
        JOB_STATUS[job_id] = "completed"
        JOB_END_TIME[job_id] = time.time()
        print(f"[MASTER] Job {job_id} completed: {report.summary()}")

    except Exception as e:
        JOB_STATUS[job_id] = f"failed: {e}"
        JOB_END_TIME[job_id] = time.time()
        print(f"[MASTER] Job {job_id} failed:", e)


def start_job(request: SplitRequest, job_id, background: bool = True):
    """
    Registers split job `job_id` and runs it, in a background thread unless
    `background` is False.
    """
    print(f"[MASTER] start_job called for {job_id}")

    JOB_STATUS[job_id] = "processing"
    JOB_START_TIME[job_id] = time.time()

    if not background:
        run_job(request, job_id)
        return job_id

    thread = threading.Thread(
        target=run_job,
        args=(request, job_id),
        daemon=True
    )
    thread.start()

    return job_id
