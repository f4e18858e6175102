import logging
from aiohttp import web
from yarl import URL

from social.graze.names.app.config import (
    EnsAppKey,
    HealthGaugeAppKey,
    MetricsClientAppKey,
    SettingsAppKey,
)
from social.graze.names.app.tasks import schedule_shadow_comparison
from social.graze.names.resolve.ens import first_param, is_address, resolve_subject

logger = logging.getLogger(__name__)


def cache_control_value(max_age: int) -> str:
    return f"s-maxage={max_age}, stale-while-revalidate"


async def handle_ens_resolve(request: web.Request):
    """
    Resolve an address or ENS name given as the last path segment.

    Mixed case input is redirected to the lower case URL first so that every identity has exactly one cacheable
    URL. Provider failures are answered with a 500 carrying the partial result and the error message.
    """
    input_subject = first_param(request.match_info["address"])
    lowercase_subject = input_subject.lower()

    if input_subject != lowercase_subject:
        location = str(request.match_info.route.url_for(address=lowercase_subject))
        raw_query = request.rel_url.raw_query_string
        if raw_query:
            location = f"{location}?{raw_query}"
        raise web.HTTPTemporaryRedirect(URL(location, encoded=True))

    settings = request.app[SettingsAppKey]
    result = await resolve_subject(
        request.app[EnsAppKey], lowercase_subject, settings.avatar_base_url
    )

    if result.error is not None:
        await request.app[HealthGaugeAppKey].record_failure()
        request.app[MetricsClientAppKey].increment(
            "ens.resolve.error",
            1,
            tag_dict={"kind": "address" if is_address(lowercase_subject) else "name"},
        )
        return web.json_response(result.to_json(), status=500)

    if settings.shadow_resolver_url:
        schedule_shadow_comparison(request.app, lowercase_subject, result)

    response = web.json_response(result.to_json())
    response.headers["CDN-Cache-Control"] = cache_control_value(settings.cache_max_age)
    return response
