"""funcframe application class.

Mutable during setup (route registration, lifecycle hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

from __future__ import annotations

import inspect
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from funcframe._internal.asgi import Receive, Scope, Send
from funcframe._internal.types import NormalizedHandler, TimingPolicy, UserFunction
from funcframe.config import FunctionConfig
from funcframe.routing.router import Router
from funcframe.server.handler import handle_request
from funcframe.signature import SignatureType


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    path: str
    handler: NormalizedHandler
    methods: frozenset[str] | None
    prefix: bool = False
    name: str | None = None


class FunctionApp:
    """An ASGI application serving functions.

    Routes are layers matched in registration order. Every layer is called
    as ``handler(request, response, next)`` and either writes the response
    or awaits ``next()`` to hand over to the following matching layer::

        app = FunctionApp()

        @app.route("/hello", methods=["GET"])
        def hello(request, response, next):
            response.send("hello")

    Most apps are built with ``FunctionApp.for_function`` instead, which
    registers the routes for one user function.

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread compiles the router, even when
        several ASGI workers call ``__call__()`` on first request.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_pending_routes",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: FunctionConfig | None = None) -> None:
        self.config: FunctionConfig = config or FunctionConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._router: Router | None = None

    @classmethod
    def for_function(
        cls,
        user_function: UserFunction,
        signature_type: SignatureType | str = SignatureType.HTTP,
        config: FunctionConfig | None = None,
        *,
        timing: TimingPolicy | None = None,
    ) -> FunctionApp:
        """Create an app serving *user_function* with its signature's routes."""
        from funcframe.routes import register_function_routes

        app = cls(config)
        register_function_routes(app, user_function, SignatureType.parse(signature_type), timing=timing)
        return app

    # -- Route registration --

    def use(self, path: str, handler: NormalizedHandler) -> None:
        """Register a layer for every method on *path* and everything below it."""
        self._add(_PendingRoute(path, handler, None, prefix=True))

    def all(self, path: str, handler: NormalizedHandler) -> None:
        """Register a route for every method on *path*."""
        self._add(_PendingRoute(path, handler, None))

    def post(self, path: str, handler: NormalizedHandler) -> None:
        """Register a POST route on *path*."""
        self._add(_PendingRoute(path, handler, frozenset({"POST"})))

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[NormalizedHandler], NormalizedHandler]:
        """Register a route handler via decorator.

        Args:
            path: URL path pattern. ``{param}`` captures one segment,
                ``{param:path}`` the rest of the path.
            methods: HTTP methods. Defaults to ``["GET"]``.
            name: Optional route name.
        """

        def decorator(func: NormalizedHandler) -> NormalizedHandler:
            allowed = frozenset(m.upper() for m in (methods or ["GET"]))
            self._add(_PendingRoute(path, func, allowed, name=name))
            return func

        return decorator

    def _add(self, pending: _PendingRoute) -> None:
        self._check_not_frozen()
        self._pending_routes.append(pending)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the app and serve it with uvicorn."""
        self._ensure_frozen()

        from funcframe.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            log_level=self.config.log_level,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        assert self._router is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            debug=self.config.debug,
            max_content_length=self.config.max_content_length,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup, runs the registered hooks, and signals
        completion back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await _run_hooks(self._startup_hooks)
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await _run_hooks(self._shutdown_hooks)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the route table. MUST only be called while holding _freeze_lock."""
        router = Router()
        for pending in self._pending_routes:
            router.add(
                pending.path,
                pending.handler,
                methods=pending.methods,
                prefix=pending.prefix,
                name=pending.name,
            )
        router.compile()
        self._router = router
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and hooks before calling app.run()."
            )
            raise RuntimeError(msg)


async def _run_hooks(hooks: list[Callable[..., Any]]) -> None:
    for hook in hooks:
        result = hook()
        if inspect.isawaitable(result):
            await result
