"""Wren application class.

Mutable during setup (extra handlers, template mounts, lifecycle hooks).
Frozen at runtime when app.run() or __call__() is first invoked; freezing
discovers the templates and compiles the handler chain.
"""

import dataclasses
import inspect
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kida import Environment

from wren._internal.asgi import Receive, Scope, Send
from wren.config import AppConfig
from wren.handlers.not_found import NotFoundResponder
from wren.handlers.static import StaticFiles
from wren.routing.chain import HandlerChain
from wren.routing.protocol import ChainHandler
from wren.routing.router import RouterConfig, TemplateRouter
from wren.server.handler import handle_request
from wren.templating.integration import create_environment
from wren.templating.registry import TemplateRegistry, discover_templates

logger = logging.getLogger("wren.app")


@dataclass(slots=True)
class _PendingMount:
    """A template router waiting to be built against the registry."""

    mount: str
    sub_root: str | Path | None
    use_index_files: bool | None
    rank: int | None


class App:
    """The wren application.

    Mutable during setup (handlers, mounts, hooks).  Frozen at runtime
    when ``app.run()`` or ``__call__()`` is first invoked.

    Freezing performs template discovery once.  If discovery fails the
    error propagates and the app never serves: there is no partially
    built registry to fall back to.

    Thread safety:
        The freeze transition uses a Lock + double-check so exactly one
        thread discovers templates and compiles the chain, even when
        several ASGI workers call ``__call__()`` concurrently on first
        request.  After that every structure is read-only.
    """

    __slots__ = (
        "_chain",
        "_custom_kida_env",
        "_extra_handlers",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_not_found",
        "_pending_mounts",
        "_registry",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._extra_handlers: list[ChainHandler] = []
        self._pending_mounts: list[_PendingMount] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._custom_kida_env: Environment | None = kida_env

        # Compiled state, set during _freeze()
        self._registry: TemplateRegistry | None = None
        self._kida_env: Environment | None = None
        self._chain: HandlerChain | None = None
        self._not_found: NotFoundResponder | None = None

    # -- Chain composition --

    def add_handler(self, handler: ChainHandler) -> None:
        """Add a chain handler, tried in ``handler.rank`` order."""
        self._check_not_frozen()
        self._extra_handlers.append(handler)

    def mount_templates(
        self,
        mount: str,
        *,
        sub_root: str | Path | None = None,
        use_index_files: bool | None = None,
        rank: int | None = None,
    ) -> None:
        """Serve templates under an additional URL prefix.

        The extra router shares the app's registry.  Options left as
        ``None`` inherit from the app config.

        Example::

            # /docs/intro -> templates/manual/intro.html
            app.mount_templates("/docs", sub_root="manual", rank=5)
        """
        self._check_not_frozen()
        self._pending_mounts.append(_PendingMount(mount, sub_root, use_index_files, rank))

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run after template discovery, before the server begins
        accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Compiled state --

    @property
    def registry(self) -> TemplateRegistry:
        """The discovered templates.  Freezes the app on first access."""
        self._ensure_frozen()
        assert self._registry is not None
        return self._registry

    @property
    def chain(self) -> HandlerChain:
        """The compiled handler chain.  Freezes the app on first access."""
        self._ensure_frozen()
        assert self._chain is not None
        return self._chain

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start the server (dev or production based on config.debug).

        Discovers templates and compiles the chain before binding, so a
        broken template directory stops startup immediately.
        """
        self._ensure_frozen()

        from wren.server.run import serve

        serve(self, host=host, port=port)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        assert self._chain is not None
        assert self._not_found is not None

        await handle_request(
            scope,
            receive,
            send,
            chain=self._chain,
            not_found=self._not_found,
            debug=self.config.debug,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Discovery happens at startup; a failure is reported as
        ``lifespan.startup.failed`` so the server refuses to start.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    await _run_hooks(self._startup_hooks)
                except Exception as exc:
                    logger.exception("Startup failed")
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
        """Discover templates and compile the chain.

        MUST only be called while holding _freeze_lock.
        """
        config = self.config
        logger.debug(
            "Config: %s",
            ", ".join(f"{f.name}={getattr(config, f.name)!r}" for f in dataclasses.fields(config)),
        )

        # 1. Discover templates (fatal on failure)
        registry = discover_templates(
            config.template_dir,
            suffixes=config.template_suffixes,
            strict=config.strict_templates,
        )

        # 2. Initialize kida environment
        if self._custom_kida_env is not None:
            env = self._custom_kida_env
        else:
            env = create_environment(config)

        # 3. Build the chain: template routers, static files, extra handlers
        public_root = config.public_dir if config.public_dir is not None else "public"
        handlers: list[ChainHandler] = [
            TemplateRouter(
                registry,
                env,
                RouterConfig(
                    rank=config.template_rank,
                    use_index_files=config.use_index_files,
                    sub_root=config.template_page_root,
                    public_root=public_root,
                    render_timeout=config.render_timeout,
                ),
            )
        ]
        for pending in self._pending_mounts:
            handlers.append(
                TemplateRouter(
                    registry,
                    env,
                    RouterConfig(
                        rank=config.template_rank if pending.rank is None else pending.rank,
                        use_index_files=(
                            config.use_index_files
                            if pending.use_index_files is None
                            else pending.use_index_files
                        ),
                        sub_root=pending.sub_root,
                        public_root=public_root,
                        mount=pending.mount,
                        render_timeout=config.render_timeout,
                    ),
                )
            )

        if config.public_dir is not None:
            if Path(config.public_dir).is_dir():
                handlers.append(
                    StaticFiles(
                        config.public_dir,
                        rank=config.static_rank,
                        index=config.static_index,
                        cache_control=config.cache_control,
                    )
                )
            else:
                logger.warning(
                    "Public directory not found, static files disabled: %s", config.public_dir
                )

        handlers.extend(self._extra_handlers)

        self._registry = registry
        self._kida_env = env
        self._chain = HandlerChain(handlers)
        self._not_found = NotFoundResponder(registry, env, config.not_found_template)
        self._frozen = True

        logger.info("Use index files: %s", config.use_index_files)
        logger.info("Templates: %d", len(registry))
        for handler in self._chain.handlers:
            logger.info("Mounted %r", handler)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Add handlers, mounts, and hooks before calling app.run()."
            )
            raise RuntimeError(msg)


async def _run_hooks(hooks: list[Callable[..., Any]]) -> None:
    for hook in hooks:
        result = hook()
        if inspect.isawaitable(result):
            await result
