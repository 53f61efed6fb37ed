"""Template router — serves discovered templates by URL path.

The router is a chain handler: on a registry hit it renders the template
with an empty context and answers; on a miss it declines so static files
and the not-found page get their turn.  It never writes a partial
response and keeps no per-request state.
"""

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

import anyio
from anyio import to_thread
from kida import Environment

from wren.errors import ConfigurationError, RenderFailure
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.protocol import DECLINE, Outcome
from wren.routing.resolve import resolve
from wren.templating.integration import render_handle
from wren.templating.registry import TemplateHandle, TemplateRegistry

logger = logging.getLogger("wren.router")

_SERVED_METHODS = frozenset({"GET", "HEAD"})


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration, validated once at construction.

    Attributes:
        rank: Position in the handler chain (lower is tried first).
        use_index_files: Serve ``index`` for the root path ``/``.  A
            trailing slash elsewhere is ignored: ``/about/`` is ``about``.
        sub_root: Prefix joined to every lookup, so ``/about`` resolves
            ``<sub_root>/about``.  Normalized to a relative ``/`` path.
        public_root: The sibling static directory; used in :attr:`TemplateRouter.name`.
        mount: URL prefix the router answers under.  Requests outside it
            decline; the prefix is removed before resolution.
        index_name: Identifier segment used for index requests.
        render_timeout: Seconds allowed for one render, or None for no
            limit.  When set, rendering runs in a worker thread.
    """

    rank: int = 10
    use_index_files: bool = False
    sub_root: str | Path | None = None
    public_root: str | Path = "public"
    mount: str = "/"
    index_name: str = "index"
    render_timeout: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "sub_root", _normalize_sub_root(self.sub_root))
        object.__setattr__(self, "public_root", Path(self.public_root))
        object.__setattr__(self, "mount", "/" + self.mount.strip("/"))

        if not self.index_name or "/" in self.index_name:
            msg = f"index_name must be a single path segment, got {self.index_name!r}"
            raise ConfigurationError(msg)
        if self.render_timeout is not None and self.render_timeout <= 0:
            msg = f"render_timeout must be positive, got {self.render_timeout!r}"
            raise ConfigurationError(msg)


def _normalize_sub_root(sub_root: str | Path | None) -> str | None:
    if sub_root is None:
        return None
    posix = PurePosixPath(str(sub_root).replace("\\", "/"))
    if posix.is_absolute():
        msg = f"sub_root must be relative to the template directory, got {str(sub_root)!r}"
        raise ConfigurationError(msg)
    if ".." in posix.parts:
        msg = f"sub_root must not contain '..', got {str(sub_root)!r}"
        raise ConfigurationError(msg)
    normalized = posix.as_posix()
    return None if normalized == "." else normalized


def content_type_for(template_name: str) -> str:
    """Guess the response content type from a template's file name.

    Engine suffixes are peeled off from the right until a known type
    appears, so ``feed.xml.hbs`` is served as XML and ``page.html.hbs``
    as HTML.  Unknown names default to HTML.
    """
    name = PurePosixPath(template_name).name
    while "." in name:
        guessed, _ = mimetypes.guess_type(name)
        if guessed is not None:
            if guessed.startswith("text/"):
                return f"{guessed}; charset=utf-8"
            return guessed
        name = name.rsplit(".", 1)[0]
    return "text/html; charset=utf-8"


class TemplateRouter:
    """Chain handler that answers requests with discovered templates.

    Several routers may share one registry, e.g. mounted at different
    prefixes with different sub-roots::

        registry = TemplateRegistry.discover("templates")
        docs = TemplateRouter(registry, env, RouterConfig(mount="/docs", sub_root="docs"))
        site = TemplateRouter(registry, env, RouterConfig(use_index_files=True))
    """

    __slots__ = ("_config", "_env", "_registry")

    def __init__(
        self,
        registry: TemplateRegistry,
        env: Environment,
        config: RouterConfig | None = None,
    ) -> None:
        self._registry = registry
        self._env = env
        self._config = config or RouterConfig()

    @property
    def rank(self) -> int:
        return self._config.rank

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def registry(self) -> TemplateRegistry:
        return self._registry

    @property
    def name(self) -> str:
        """Diagnostic name, as shown in startup logs."""
        return (
            f"TemplateRouter: mount: {self._config.mount!r}, "
            f"templates: {self._config.sub_root!r}, public: {str(self._config.public_root)!r}"
        )

    def __repr__(self) -> str:
        return f"<{self.name} rank={self.rank}>"

    async def handle(self, request: Request) -> Outcome:
        """Render the template *request* resolves to, or decline.

        Raises:
            InvalidPath: The request path cannot be decoded.
            RenderFailure: The template was found but failed to render.
        """
        if request.method not in _SERVED_METHODS:
            return DECLINE

        relative = self._strip_mount(request.raw_path)
        if relative is None:
            return DECLINE

        handle = resolve(relative, self._config, self._registry)
        if handle is None:
            return DECLINE

        body = await self._render(handle)
        logger.info("Responding with template: %r", handle.template_name)
        return Response(body=body, content_type=content_type_for(handle.template_name))

    def _strip_mount(self, raw_path: str) -> str | None:
        """Return *raw_path* relative to the mount, or None if outside it."""
        mount = self._config.mount
        if mount == "/":
            return raw_path
        if raw_path == mount:
            return "/"
        if raw_path.startswith(mount + "/"):
            return raw_path[len(mount) :]
        return None

    async def _render(self, handle: TemplateHandle) -> str:
        timeout = self._config.render_timeout
        try:
            if timeout is None:
                return render_handle(self._env, handle)
            with anyio.fail_after(timeout):
                return await to_thread.run_sync(
                    render_handle, self._env, handle, abandon_on_cancel=True
                )
        except TimeoutError as exc:
            logger.error("Timed out rendering template: %r", handle.template_name)
            raise RenderFailure(handle.template_name, f"timed out after {timeout}s") from exc
        except Exception as exc:
            logger.error("Failed to render template: %r", handle.template_name)
            raise RenderFailure(handle.template_name, str(exc)) from exc
