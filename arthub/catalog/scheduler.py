# -*- coding: utf-8 -*-
"""
Refresh Scheduler - Periodic background refresh of configured catalogs.

Runs catalog refresh sweeps on a single worker thread so the database
keeps one writer. A timer thread submits a sweep every
``update_interval`` seconds; a sweep is not queued while another one is
still pending.

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-02-06

Modified
--------
2026-02-06
"""

# Standard library
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, Optional, Sequence

logger = logging.getLogger(__name__)

# Artifact Hub internal
from arthub.catalog.models import CatalogRepoConfig
from arthub.catalog.service import CatalogService

ConfigProvider = Callable[[], Sequence[CatalogRepoConfig]]


class RefreshScheduler:
    """Schedules catalog refresh sweeps in the background.

    Parameters
    ----------
    service : CatalogService
        Service performing the refreshes.
    configs : ConfigProvider
        Returns the current catalog configuration at each sweep.
    interval : float
        Seconds between sweeps. Default 3600.
    """

    def __init__(
        self,
        service: CatalogService,
        configs: ConfigProvider,
        interval: float = 3600.0,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self._service = service
        self._configs = configs
        self._interval = interval
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="arthub-refresh"
        )
        self._lock = threading.Lock()
        self._pending: Optional[Future] = None
        self._stop = threading.Event()
        self._timer: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._timer is not None and self._timer.is_alive()

    def submit_refresh(self) -> Future:
        """Queue a refresh sweep of every enabled catalog.

        Returns
        -------
        Future
            Resolves to the sweep outcome (catalog id -> error or None).
            If a sweep is already pending, its future is returned.
        """
        with self._lock:
            if self._pending is not None and not self._pending.done():
                logger.debug("Refresh sweep already pending; not queuing another")
                return self._pending
            self._pending = self._executor.submit(self._sweep)
            return self._pending

    def _sweep(self) -> Dict[str, Optional[str]]:
        configs = list(self._configs())
        logger.info("Refresh sweep over %d catalog(s)", len(configs))
        return self._service.refresh_all(configs)

    def start(self) -> None:
        """Start periodic sweeps; the first runs after one interval."""
        if self.running:
            return
        self._stop.clear()
        self._timer = threading.Thread(
            target=self._run, name="arthub-refresh-timer", daemon=True
        )
        self._timer.start()
        logger.info("Refresh scheduler started (every %ss)", self._interval)

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self.submit_refresh()

    def stop(self, wait: bool = True) -> None:
        """Stop the timer and shut down the worker thread.

        Parameters
        ----------
        wait : bool
            If True, wait for a running sweep to complete.
        """
        self._stop.set()
        if self._timer is not None:
            self._timer.join()
            self._timer = None
        self._executor.shutdown(wait=wait)
        logger.info("Refresh scheduler stopped")
