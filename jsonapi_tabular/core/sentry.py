from sentry_sdk.integrations.aiohttp import AioHttpIntegration

from jsonapi_tabular import config


def get_sentry_kwargs():
    """
    Returns Sentry configuration kwargs.

    The integration is created fresh each time, it must not exist before
    sentry_sdk.init() is called to hook into aiohttp's internals.
    """
    return {
        "dsn": config.SENTRY_DSN or None,
        "integrations": [AioHttpIntegration()],
        "environment": config.SERVER_NAME or "unknown",
        "traces_sample_rate": config.SENTRY_SAMPLE_RATE or 1.0,
    }
