"""
Unit tests for background tasks in social.graze.names.app.tasks
"""

import asyncio
import logging
from unittest.mock import AsyncMock, Mock, patch

import pytest
from aiohttp import web

from social.graze.names.app.config import (
    HealthGaugeAppKey,
    MetricsClientAppKey,
    SessionAppKey,
    SettingsAppKey,
    ShadowTasksAppKey,
)
from social.graze.names.app.tasks import (
    schedule_shadow_comparison,
    shadow_compare_task,
    tick_health_task,
)
from social.graze.names.model.health import HealthGauge
from social.graze.names.model.resolution import ResolutionResult
from social.graze.names.resolve.shadow import ShadowResult

from conftest import VITALIK_CHECKSUM


@pytest.fixture
def task_app(settings, metrics_client):
    settings.shadow_resolver_url = "https://shadow.example/{subject}"
    app = web.Application()
    app[SettingsAppKey] = settings
    app[MetricsClientAppKey] = metrics_client
    app[SessionAppKey] = Mock()
    app[HealthGaugeAppKey] = HealthGauge()
    app[ShadowTasksAppKey] = set()
    return app


@pytest.fixture
def primary():
    return ResolutionResult(
        address=VITALIK_CHECKSUM, name="vitalik.eth", display_name="vitalik.eth"
    )


class TestShadowCompareTask:
    @pytest.mark.asyncio
    @patch("social.graze.names.app.tasks.shadow_resolve")
    async def test_agreement_is_quiet(self, mock_shadow, task_app, primary, metrics_client, caplog):
        mock_shadow.return_value = ShadowResult(address=VITALIK_CHECKSUM, name="vitalik.eth")

        with caplog.at_level(logging.WARNING):
            await shadow_compare_task(task_app, "vitalik.eth", primary)

        mock_shadow.assert_awaited_once_with(
            task_app[SessionAppKey], "https://shadow.example/{subject}", "vitalik.eth"
        )
        metrics_client.increment.assert_not_called()
        assert "shadow mismatch" not in caplog.text

    @pytest.mark.asyncio
    @patch("social.graze.names.app.tasks.shadow_resolve")
    async def test_mismatch_is_logged(self, mock_shadow, task_app, primary, metrics_client, caplog):
        mock_shadow.return_value = ShadowResult(address=None, name="vitalik.eth")

        with caplog.at_level(logging.WARNING):
            await shadow_compare_task(task_app, "vitalik.eth", primary)

        assert "shadow mismatch for vitalik.eth on address" in caplog.text
        metrics_client.increment.assert_called_once_with(
            "ens.shadow.mismatch", 1, tag_dict={"field": "address"}
        )

    @pytest.mark.asyncio
    @patch("social.graze.names.app.tasks.shadow_resolve")
    async def test_shadow_failure_is_swallowed(self, mock_shadow, task_app, primary, metrics_client):
        mock_shadow.side_effect = ConnectionError("shadow down")

        await shadow_compare_task(task_app, "vitalik.eth", primary)

        metrics_client.increment.assert_called_once_with(
            "ens.shadow.error", 1, tag_dict={"exception": "ConnectionError"}
        )

    @pytest.mark.asyncio
    @patch("social.graze.names.app.tasks.shadow_resolve")
    async def test_shadow_not_found(self, mock_shadow, task_app, primary, metrics_client):
        mock_shadow.return_value = None

        await shadow_compare_task(task_app, "vitalik.eth", primary)

        metrics_client.increment.assert_not_called()


class TestScheduleShadowComparison:
    @pytest.mark.asyncio
    @patch("social.graze.names.app.tasks.shadow_compare_task", new_callable=AsyncMock)
    async def test_task_tracked_until_done(self, mock_compare, task_app, primary, metrics_client):
        schedule_shadow_comparison(task_app, "vitalik.eth", primary)

        tasks = task_app[ShadowTasksAppKey]
        assert len(tasks) == 1
        metrics_client.gauge.assert_called_once_with("ens.shadow.inflight", 1)
        await asyncio.gather(*list(tasks))
        await asyncio.sleep(0)

        assert len(tasks) == 0
        mock_compare.assert_awaited_once_with(task_app, "vitalik.eth", primary)


class TestTickHealthTask:
    @pytest.mark.asyncio
    async def test_tick_drains_gauge(self, task_app):
        gauge = task_app[HealthGaugeAppKey]
        await gauge.record_failure(2)

        task = asyncio.create_task(tick_health_task(task_app))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert await gauge.failures() == 1
