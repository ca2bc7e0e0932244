"""Track what a mounted post page shows: a loading placeholder or the post.

A view starts in :attr:`RenderState.LOADING` when its path was not
pre-rendered and moves to :attr:`RenderState.RENDERED` once the on-demand
fetch resolves. Preview is an overlay on the rendered state rather than a
state of its own. A missing post never enters the machine: the
``PostNotFoundError`` raised by the fetch propagates to the caller.

The comment thread is a declared effect: each view attaches exactly one
:class:`CommentEmbed`, keyed by the page path, no matter how often it
re-renders.

Example
-------
>>> view = PostPageView(renderer)  # doctest: +SKIP
>>> view.state  # doctest: +SKIP
<RenderState.LOADING: 'loading'>
>>> view.resolve(props)  # doctest: +SKIP
>>> view.state  # doctest: +SKIP
<RenderState.RENDERED: 'rendered'>
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from .config import CommentsConfig
    from .models import PageContext, PageProps
    from .renderer import PageRenderer


class RenderState(enum.Enum):
    """Lifecycle states of a mounted post page."""

    LOADING = "loading"
    RENDERED = "rendered"


class RenderStateError(RuntimeError):
    """Raised when a view is asked for data it does not have yet."""


@dc.dataclass(frozen=True, slots=True)
class CommentEmbed:
    """Comment-thread widget attached to a rendered post page."""

    path: str
    repo: str
    issue_term: str = "pathname"
    label: str = "blog-comment"
    theme: str = "github-dark"
    script_src: str = "https://utteranc.es/client.js"

    @classmethod
    def for_path(cls, path: str, config: CommentsConfig) -> CommentEmbed:
        """Return the embed for ``path`` using the configured widget settings."""
        return cls(
            path=path,
            repo=config.repo,
            issue_term=config.issue_term,
            label=config.label,
            theme=config.theme,
            script_src=config.script_src,
        )

    def attributes(self) -> dict[str, str]:
        """Return the script attributes that parameterize the widget."""
        return {
            "repo": self.repo,
            "issue-term": self.issue_term,
            "label": self.label,
            "theme": self.theme,
            "data-path": self.path,
        }


class PostPageView:
    """One mounted instance of a post page."""

    def __init__(
        self,
        renderer: PageRenderer,
        props: PageProps | None = None,
        *,
        comments: CommentsConfig | None = None,
    ) -> None:
        """Mount a view, pre-rendered when ``props`` is supplied.

        Parameters
        ----------
        renderer : PageRenderer
            Renderer for the loading placeholder and the post page.
        props : PageProps, optional
            Data produced at build time; ``None`` means the path was not
            pre-rendered and the view starts out loading.
        comments : CommentsConfig, optional
            Comment widget settings; no widget is attached when ``None``.
        """
        self.renderer = renderer
        self.comments_config = comments
        self._props: PageProps | None = props
        self._embed: CommentEmbed | None = None
        initial = RenderState.LOADING if props is None else RenderState.RENDERED
        self.transitions: list[RenderState] = [initial]

    @property
    def state(self) -> RenderState:
        """Return the current state."""
        return self.transitions[-1]

    @property
    def is_fallback(self) -> bool:
        """Return True while no build-time or fetched data is available."""
        return self._props is None

    @property
    def context(self) -> PageContext:
        """Return the resolved page context."""
        if self._props is None:
            msg = "Post data has not been resolved yet."
            raise RenderStateError(msg)
        return self._props.context

    @property
    def preview(self) -> bool:
        """Return True when the exit-preview affordance is shown."""
        return self._props is not None and self._props.context.preview

    @property
    def attached_effects(self) -> tuple[CommentEmbed, ...]:
        """Return the comment embeds attached to this view (at most one)."""
        return (self._embed,) if self._embed else ()

    def resolve(self, props: PageProps) -> None:
        """Record fetched data and move to :attr:`RenderState.RENDERED`.

        Data for a different page drops the comment embed of the old path.
        """
        if self._embed is not None and self._embed.path != props.context.path:
            self._embed = None
        self._props = props
        if self.state is not RenderState.RENDERED:
            self.transitions.append(RenderState.RENDERED)

    def render(self) -> str:
        """Return the HTML for the current state."""
        if self._props is None:
            return self.renderer.render_loading()
        context = self._props.context
        return self.renderer.render_post(context, comments=self._attach_comments(context))

    def _attach_comments(self, context: PageContext) -> CommentEmbed | None:
        if self.comments_config is None:
            return None
        if self._embed is None:
            self._embed = CommentEmbed.for_path(context.path, self.comments_config)
        return self._embed


__all__ = [
    "CommentEmbed",
    "PostPageView",
    "RenderState",
    "RenderStateError",
]
