"""Background bridge to one search-backend process.

A supervisor thread launches the backend, a writer thread drains the bounded
request queue into its stdin, and the supervisor reads stdout line by line.
Everything the UI needs arrives through ``drain_events`` in emission order.
"""

from __future__ import annotations

import subprocess
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from queue import Empty, Full, Queue

from ..logger import logging
from .protocol import ExitRequest, ProtocolError, Request, Response, decode_response, encode_request

logger = logging.getLogger(__name__)

QUEUE_POLL_SECONDS = 0.1
STOP_TIMEOUT_SECONDS = 2.0
STABLE_UPTIME_SECONDS = 30.0


class BackendHandle:
    """Outbound request endpoint bound to one backend process.

    ``send`` blocks while the buffer is full. Once the handle is closed
    (backend exited or bridge stopped) requests are dropped.
    """

    def __init__(self, buffer_size: int) -> None:
        self._queue: Queue[Request] = Queue(maxsize=max(1, buffer_size))
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, request: Request) -> bool:
        """Enqueue ``request``; return ``False`` when it was dropped."""
        while not self._closed.is_set():
            try:
                self._queue.put(request, timeout=QUEUE_POLL_SECONDS)
                return True
            except Full:
                continue
        logger.debug("Dropping %r: backend handle is closed", request)
        return False

    def send_nowait(self, request: Request) -> bool:
        if self._closed.is_set():
            return False
        try:
            self._queue.put_nowait(request)
        except Full:
            return False
        return True

    def close(self) -> None:
        self._closed.set()

    def next_request(self, timeout: float = QUEUE_POLL_SECONDS) -> Request | None:
        """Pop the next queued request, or ``None`` after ``timeout``."""
        try:
            return self._queue.get(timeout=timeout)
        except Empty:
            return None


@dataclass(frozen=True)
class Started:
    """Backend is up; requests may be sent through ``handle``."""

    handle: BackendHandle


@dataclass(frozen=True)
class ResponseEvent:
    response: Response


@dataclass(frozen=True)
class Exited:
    """Backend process ended (``returncode`` is ``None`` if it never started)."""

    returncode: int | None
    will_restart: bool = False


BackendEvent = Started | ResponseEvent | Exited


class BackendBridge:
    """Supervise one backend process and translate its line protocol.

    The backend is relaunched up to ``restart_limit`` times after it exits;
    each relaunch produces a fresh ``Started`` event with a new handle. A run
    that stays up for ``stable_uptime_seconds`` resets the restart count.
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        request_buffer_size: int = 32,
        event_buffer_size: int = 64,
        restart_limit: int = 3,
        restart_delay_seconds: float = 1.0,
        stable_uptime_seconds: float = STABLE_UPTIME_SECONDS,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ) -> None:
        self._command = list(command)
        self._request_buffer_size = request_buffer_size
        self._restart_limit = max(0, restart_limit)
        self._restart_delay_seconds = max(0.0, restart_delay_seconds)
        self._stable_uptime_seconds = max(0.0, stable_uptime_seconds)
        self._popen = popen
        self._events: Queue[BackendEvent] = Queue(maxsize=max(1, event_buffer_size))
        self._stopping = threading.Event()
        self._lock = threading.Lock()
        self._process: subprocess.Popen | None = None
        self._handle: BackendHandle | None = None
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Spawn the supervisor thread; safe to call once."""
        with self._lock:
            if self._thread is not None:
                return
            self._thread = threading.Thread(
                target=self._supervise,
                name="lazylauncher-backend",
                daemon=True,
            )
        self._thread.start()

    def drain_events(self) -> list[BackendEvent]:
        """Return every event delivered since the last drain, oldest first."""
        out: list[BackendEvent] = []
        while True:
            try:
                out.append(self._events.get_nowait())
            except Empty:
                break
        return out

    def stop(self, timeout: float = STOP_TIMEOUT_SECONDS) -> None:
        """Ask the backend to exit, then terminate it if it lingers."""
        self._stopping.set()
        with self._lock:
            process = self._process
            handle = self._handle
        if handle is not None:
            handle.send_nowait(ExitRequest())
        if process is not None:
            try:
                process.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                logger.warning("Backend did not exit after %.1fs; terminating", timeout)
                process.terminate()
                try:
                    process.wait(timeout=timeout)
                except subprocess.TimeoutExpired:
                    process.kill()
        if handle is not None:
            handle.close()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def _emit(self, event: BackendEvent) -> None:
        while not self._stopping.is_set():
            try:
                self._events.put(event, timeout=QUEUE_POLL_SECONDS)
                return
            except Full:
                continue

    def _supervise(self) -> None:
        restarts = 0
        while not self._stopping.is_set():
            started_at = time.monotonic()
            returncode = self._run_once()
            if restarts and time.monotonic() - started_at >= self._stable_uptime_seconds:
                logger.info("Backend ran for at least %.0fs; resetting restart count", self._stable_uptime_seconds)
                restarts = 0
            will_restart = not self._stopping.is_set() and restarts < self._restart_limit
            self._emit(Exited(returncode, will_restart=will_restart))
            if not will_restart:
                if not self._stopping.is_set():
                    logger.error(
                        "Backend %s exited (code %s); restart limit of %d reached",
                        self._command,
                        returncode,
                        self._restart_limit,
                    )
                return
            restarts += 1
            logger.warning(
                "Backend exited (code %s); restarting (%d/%d)",
                returncode,
                restarts,
                self._restart_limit,
            )
            if self._stopping.wait(self._restart_delay_seconds):
                return

    def _run_once(self) -> int | None:
        try:
            process = self._popen(
                self._command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as exc:
            logger.error("Failed to launch backend %s: %s", self._command, exc)
            return None

        handle = BackendHandle(self._request_buffer_size)
        with self._lock:
            self._process = process
            self._handle = handle
        logger.info("Backend started: %s (pid %s)", self._command, process.pid)

        writer = threading.Thread(
            target=self._write_requests,
            args=(process, handle),
            name="lazylauncher-backend-writer",
            daemon=True,
        )
        writer.start()
        self._emit(Started(handle))

        try:
            assert process.stdout is not None
            for raw in process.stdout:
                line = raw.strip()
                if not line:
                    continue
                try:
                    response = decode_response(line)
                except ProtocolError as exc:
                    logger.warning("Skipping malformed backend line: %s", exc)
                    continue
                self._emit(ResponseEvent(response))
        finally:
            handle.close()
            writer.join(timeout=STOP_TIMEOUT_SECONDS)
            returncode = process.wait()
            with self._lock:
                self._process = None
                self._handle = None
        logger.info("Backend exited with code %s", returncode)
        return returncode

    @staticmethod
    def _write_requests(process: subprocess.Popen, handle: BackendHandle) -> None:
        stdin = process.stdin
        assert stdin is not None
        try:
            while True:
                request = handle.next_request()
                if request is None:
                    if handle.closed:
                        return
                    continue
                stdin.write(encode_request(request) + "\n")
                stdin.flush()
                if isinstance(request, ExitRequest):
                    stdin.close()
                    return
        except (BrokenPipeError, OSError, ValueError) as exc:
            logger.warning("Backend stdin closed: %s", exc)
            handle.close()


__all__ = [
    "BackendBridge",
    "BackendEvent",
    "BackendHandle",
    "Exited",
    "ResponseEvent",
    "Started",
]
