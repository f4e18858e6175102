import asyncio
import logging
from typing import NoReturn

from aiohttp import web

from social.graze.names.app.config import (
    HealthGaugeAppKey,
    MetricsClientAppKey,
    SessionAppKey,
    SettingsAppKey,
    ShadowTasksAppKey,
)
from social.graze.names.model.resolution import ResolutionResult
from social.graze.names.resolve.shadow import compare_results, shadow_resolve

logger = logging.getLogger(__name__)


async def tick_health_task(app: web.Application) -> NoReturn:
    """
    Drain one provider failure from the health gauge every 30 seconds.
    """

    logger.info("Starting health gauge task")

    health_gauge = app[HealthGaugeAppKey]
    while True:
        await health_gauge.drain()
        await asyncio.sleep(30)


async def shadow_compare_task(
    app: web.Application, subject: str, primary: ResolutionResult
) -> None:
    """
    Resolve a subject through the shadow provider and record any disagreement with the primary result.

    Failures here are logged and counted, never raised: nothing awaits this task.
    """
    settings = app[SettingsAppKey]
    metrics_client = app[MetricsClientAppKey]

    try:
        shadow = await shadow_resolve(
            app[SessionAppKey], settings.shadow_resolver_url, subject
        )
    except Exception as e:
        logger.warning("shadow lookup failed for %s: %s", subject, e)
        metrics_client.increment(
            "ens.shadow.error", 1, tag_dict={"exception": type(e).__name__}
        )
        return

    if shadow is None:
        return

    mismatched = compare_results(primary, shadow)
    if mismatched:
        logger.warning(
            "shadow mismatch for %s on %s: primary=%s shadow=%s",
            subject,
            ",".join(mismatched),
            primary.model_dump(include={"address", "name"}),
            shadow.model_dump(),
        )
        for field in mismatched:
            metrics_client.increment("ens.shadow.mismatch", 1, tag_dict={"field": field})


def schedule_shadow_comparison(
    app: web.Application, subject: str, primary: ResolutionResult
) -> None:
    """
    Start a shadow comparison in the background without waiting on it.

    The task is held in the application's task set until it finishes so that it is not garbage collected and so
    that shutdown can cancel it.
    """
    tasks = app[ShadowTasksAppKey]
    task = asyncio.create_task(shadow_compare_task(app, subject, primary))
    tasks.add(task)
    task.add_done_callback(tasks.discard)
    app[MetricsClientAppKey].gauge("ens.shadow.inflight", len(tasks))
