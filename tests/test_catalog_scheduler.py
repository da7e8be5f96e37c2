# -*- coding: utf-8 -*-
"""
Tests for arthub.catalog.scheduler - RefreshScheduler.

Created
-------
2026-02-06
"""

import threading
from unittest.mock import MagicMock

import pytest

from arthub.catalog.models import CatalogRepoConfig
from arthub.catalog.scheduler import RefreshScheduler


@pytest.fixture
def configs():
    return [CatalogRepoConfig(id="team", url="https://example.com/c.json")]


class TestRefreshScheduler:

    def test_submit_refresh_runs_sweep(self, configs):
        service = MagicMock()
        service.refresh_all.return_value = {"team": None}
        scheduler = RefreshScheduler(service, lambda: configs)
        try:
            future = scheduler.submit_refresh()
            assert future.result(timeout=5) == {"team": None}
            service.refresh_all.assert_called_once_with(configs)
        finally:
            scheduler.stop()

    def test_pending_sweep_is_reused(self, configs):
        release = threading.Event()
        service = MagicMock()
        service.refresh_all.side_effect = lambda c: release.wait(5) and {}
        scheduler = RefreshScheduler(service, lambda: configs)
        try:
            first = scheduler.submit_refresh()
            second = scheduler.submit_refresh()
            assert first is second
            release.set()
            first.result(timeout=5)
            assert service.refresh_all.call_count == 1
        finally:
            release.set()
            scheduler.stop()

    def test_periodic_sweeps(self, configs):
        swept = threading.Event()
        service = MagicMock()
        service.refresh_all.side_effect = lambda c: swept.set() or {}
        scheduler = RefreshScheduler(service, lambda: configs, interval=0.05)
        try:
            scheduler.start()
            assert scheduler.running
            assert swept.wait(timeout=5)
        finally:
            scheduler.stop()
        assert not scheduler.running

    def test_stop_is_safe_without_start(self, configs):
        RefreshScheduler(MagicMock(), lambda: configs).stop()

    def test_invalid_interval(self, configs):
        with pytest.raises(ValueError):
            RefreshScheduler(MagicMock(), lambda: configs, interval=0)
