"""Tracking of client connections with per-client and per-IP limits and idle timeouts."""

from __future__ import annotations

import contextlib
import json
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

from hearthweb.config import Config
from hearthweb.logger import get_logger

ACTIVE_WINDOW = 5
"""Seconds since the last activity within which a connection counts as active."""

STATS_EVERY = 10
"""Number of cleanup passes between two statistics log lines."""


class Socket(ABC):
    """A readable, writable and closable connection endpoint."""

    def __init__(self, fd: int) -> None:
        self._fd = fd

    @property
    def fd(self) -> int:
        return self._fd

    @abstractmethod
    def read(self, count: int) -> bytes:
        """Read up to ``count`` bytes."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes written."""

    @abstractmethod
    def close(self) -> bool:
        """Close the endpoint; return True on success."""


@dataclass
class _Connection:
    client_ip: str
    last_activity: float
    request_count: int = 0
    keep_alive: bool = False


def _close_quietly(sock: Any) -> None:
    with contextlib.suppress(OSError):
        sock.close()


class ConnectionManager:
    """Runs one handler thread per connection and closes idle connections."""

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        config = config if config is not None else Config()
        self.max_connections_per_client = config.get("server.max_connections_per_client", 1000)
        self.max_connections_per_ip = config.get("server.max_connections_per_ip", 100)
        self.connection_timeout = config.get("server.timeout", 60)
        self.keep_alive_timeout = config.get("server.keep_alive_timeout", 5)
        self.max_requests_per_connection = config.get("server.max_requests_per_connection", 100)
        self.cleanup_interval = config.get("server.connection_cleanup_interval", 1.0)

        self._clock = clock
        self._lock = threading.RLock()
        self._wakeup = threading.Condition(self._lock)
        self._connections: dict[Any, _Connection] = {}
        self._ip_counts: dict[str, int] = {}
        self._total_requests = 0
        self._running = True
        self._cleanup_thread = threading.Thread(
            target=self._cleanup_loop, name="connection-cleanup", daemon=True
        )
        self._cleanup_thread.start()

    def add_connection(self, sock: Any, client_ip: str, handler: Callable[[], Any]) -> bool:
        """Start ``handler`` in its own thread for ``sock``.

        Returns False, after closing ``sock``, if the manager is stopped or a
        connection limit is reached.
        """
        logger = get_logger()
        with self._lock:
            if not self._running:
                _close_quietly(sock)
                return False
            if len(self._connections) >= self.max_connections_per_client:
                logger.error("Maximum connection limit reached")
                _close_quietly(sock)
                return False
            if self._ip_counts.get(client_ip, 0) >= self.max_connections_per_ip:
                logger.error(f"Maximum connection per IP limit reached for IP: {client_ip}")
                _close_quietly(sock)
                return False

            self._ip_counts[client_ip] = self._ip_counts.get(client_ip, 0) + 1
            self._connections[sock] = _Connection(client_ip=client_ip, last_activity=self._clock())
            worker = threading.Thread(
                target=self._serve, args=(sock, handler), name=f"connection-{client_ip}", daemon=True
            )
            worker.start()
            return True

    def _serve(self, sock: Any, handler: Callable[[], Any]) -> None:
        try:
            handler()
        except Exception as exc:
            get_logger().error(f"Connection handler failed: {exc}")
        finally:
            self.close_connection(sock)

    def close_connection(self, sock: Any) -> None:
        """Forget ``sock`` and close it, if it is still tracked."""
        with self._lock:
            self._remove(sock)

    def _remove(self, sock: Any) -> bool:
        conn = self._connections.pop(sock, None)
        if conn is None:
            return False
        remaining = self._ip_counts.get(conn.client_ip, 0) - 1
        if remaining > 0:
            self._ip_counts[conn.client_ip] = remaining
        else:
            self._ip_counts.pop(conn.client_ip, None)
        _close_quietly(sock)
        return True

    def stop_all(self) -> None:
        """Close every connection, refuse new ones and stop the cleanup thread."""
        with self._lock:
            self._running = False
            sockets = list(self._connections)
            self._connections.clear()
            for sock in sockets:
                _close_quietly(sock)
            self._wakeup.notify_all()
        if self._cleanup_thread is not threading.current_thread():
            self._cleanup_thread.join()

    def update_activity(self, sock: Any) -> None:
        """Record a request on ``sock``; keep-alive ends once the request limit is hit."""
        with self._lock:
            conn = self._connections.get(sock)
            if conn is None:
                return
            conn.last_activity = self._clock()
            conn.request_count += 1
            self._total_requests += 1
            if conn.request_count >= self.max_requests_per_connection:
                conn.keep_alive = False

    def set_keep_alive(self, sock: Any, keep_alive: bool) -> None:
        with self._lock:
            conn = self._connections.get(sock)
            if conn is not None:
                conn.keep_alive = bool(keep_alive)

    def active_connection_count(self) -> int:
        """Number of connections with activity in the last few seconds."""
        with self._lock:
            now = self._clock()
            return sum(
                1
                for conn in self._connections.values()
                if int(now - conn.last_activity) < ACTIVE_WINDOW
            )

    def total_request_count(self) -> int:
        with self._lock:
            return self._total_requests

    def connection_stats(self) -> dict[str, int]:
        """Counters describing the current connections and configured limits."""
        with self._lock:
            return {
                "total_connections": len(self._connections),
                "active_connections": self.active_connection_count(),
                "total_requests": self._total_requests,
                "unique_ips": len(self._ip_counts),
                "max_connections_per_ip": self.max_connections_per_ip,
                "max_connections_per_client": self.max_connections_per_client,
            }

    def connection_count(self) -> int:
        with self._lock:
            return len(self._connections)

    def _cleanup_loop(self) -> None:
        passes = 0
        with self._lock:
            while self._running:
                self._wakeup.wait_for(lambda: not self._running, timeout=self.cleanup_interval)
                if not self._running:
                    break
                self._expire_idle()
                passes += 1
                if passes % STATS_EVERY == 0:
                    get_logger().info(
                        "Connection statistics: " + json.dumps(self.connection_stats())
                    )

    def _expire_idle(self) -> None:
        now = self._clock()
        for sock, conn in list(self._connections.items()):
            idle = int(now - conn.last_activity)
            limit = self.keep_alive_timeout if conn.keep_alive else self.connection_timeout
            if idle > limit:
                get_logger().debug(f"Closing inactive connection: {getattr(sock, 'fd', sock)}")
                self._remove(sock)

    def __enter__(self) -> "ConnectionManager":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop_all()