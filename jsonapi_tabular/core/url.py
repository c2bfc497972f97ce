from aiohttp.web_request import Request

from jsonapi_tabular import config


def external_url(url) -> str:
    return f"{config.SCHEME}://{config.SERVER_NAME}{url}"


def url_for(request: Request, route: str, *args, **kwargs) -> str:
    router = request.app.router
    if kwargs.pop("_external", None):
        return external_url(router[route].url_for(**kwargs))
    return str(router[route].url_for(**kwargs))


def self_link(request: Request) -> str:
    """External URL of the current request, query string included."""
    if request.query_string:
        return external_url(f"{request.path}?{request.query_string}")
    return external_url(request.path)
