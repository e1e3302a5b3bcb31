"""funcframe — serve HTTP, event, and CloudEvent functions over ASGI.

One user function per app. Its signature type decides how requests reach
it; every invocation is timed and logged unless the timing policy says
otherwise.

Basic usage::

    from funcframe import FunctionApp

    def hello(request, response, next):
        response.send("Hello, World!")

    app = FunctionApp.for_function(hello, "http")
    app.run()

Event functions::

    def on_upload(data, context):
        print(context.event_id, data["name"])

    app = FunctionApp.for_function(on_upload, "event")
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "CloudEvent",
    "ConfigurationError",
    "Context",
    "FunctionApp",
    "FunctionConfig",
    "FunctionsError",
    "HTTPError",
    "Request",
    "Response",
    "ResponseWriter",
    "SignatureType",
    "register_function_routes",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import funcframe`` fast while providing a clean top-level API.
    """
    if name == "FunctionApp":
        from funcframe.app import FunctionApp

        return FunctionApp

    if name == "FunctionConfig":
        from funcframe.config import FunctionConfig

        return FunctionConfig

    if name == "SignatureType":
        from funcframe.signature import SignatureType

        return SignatureType

    if name == "register_function_routes":
        from funcframe.routes import register_function_routes

        return register_function_routes

    if name == "Request":
        from funcframe.http.request import Request

        return Request

    if name in ("Response", "ResponseWriter"):
        from funcframe.http import response as _resp

        return getattr(_resp, name)

    if name in ("CloudEvent", "Context"):
        from funcframe import events as _events

        return getattr(_events, name)

    if name in ("ConfigurationError", "FunctionsError", "HTTPError"):
        from funcframe import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
