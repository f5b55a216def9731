"""Ownership of the single map widget instance behind a mounted view.

The lifecycle manager is the only holder of the widget reference. Other
controllers reach the widget through :attr:`MapLifecycle.widget` each time
they need it and treat ``None`` as "not mounted yet".
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Protocol, Sequence, Union

from geospot.models.camera import Camera
from geospot.models.entities import Position

log = logging.getLogger(__name__)


class MapWidget(Protocol):
    """Operations the controllers need from the embedded map widget.

    ``panFinished``, ``zoomFinished`` and ``markerActivated`` are Qt signals.
    The first two fire only after user gestures, never after ``set_view`` or
    ``fly_to``.
    """

    panFinished: Any
    zoomFinished: Any
    markerActivated: Any

    def camera(self) -> Camera: ...

    def target_camera(self) -> Camera: ...

    def set_view(self, center: Position, zoom: Union[int, float]) -> None: ...

    def fly_to(self, center: Position, zoom: Union[int, float], duration_ms: int) -> None: ...

    def set_markers(self, specs: Sequence[Any]) -> None: ...

    def teardown(self) -> None: ...


WidgetFactory = Callable[[Any], MapWidget]
WidgetHook = Callable[[MapWidget], None]


class MapLifecycle:
    """Creates the map widget once per mounted view and destroys it exactly once."""

    def __init__(self, factory: WidgetFactory) -> None:
        self._factory = factory
        self._container: Optional[Any] = None
        self._widget: Optional[MapWidget] = None
        self._requested = False
        self._ready_hooks: List[WidgetHook] = []
        self._release_hooks: List[WidgetHook] = []
        self.generation = 0  # number of widgets constructed so far

    # Public API ---------------------------------------------------------

    @property
    def widget(self) -> Optional[MapWidget]:
        return self._widget

    @property
    def is_active(self) -> bool:
        return self._widget is not None

    @property
    def is_pending(self) -> bool:
        """True when activation was requested but no container is attached yet."""
        return self._requested and self._widget is None

    @property
    def container(self) -> Optional[Any]:
        return self._container

    def add_ready_hook(self, hook: WidgetHook) -> None:
        """Run ``hook(widget)`` after each widget construction."""
        self._ready_hooks.append(hook)

    def add_release_hook(self, hook: WidgetHook) -> None:
        """Run ``hook(widget)`` right before each widget teardown."""
        self._release_hooks.append(hook)

    def attach_container(self, container: Any) -> None:
        """Provide the on-screen container the widget will be built into."""
        self._container = container
        if self._requested and self._widget is None:
            self._construct()

    def detach_container(self) -> None:
        self.deactivate()
        self._container = None

    def activate(self) -> None:
        if self._widget is not None:
            return
        self._requested = True
        if self._container is None:
            log.debug("Map activation deferred until a container is attached")
            return
        self._construct()

    def deactivate(self) -> None:
        self._requested = False
        widget = self._widget
        if widget is None:
            return
        self._widget = None

        for hook in self._release_hooks:
            try:
                hook(widget)
            except Exception:
                log.exception("Map release hook %r failed", hook)
        try:
            widget.teardown()
        except Exception:
            log.exception("Error removing map widget")
        log.debug("Map widget #%d released", self.generation)

    # Internal helpers ---------------------------------------------------

    def _construct(self) -> None:
        try:
            widget = self._factory(self._container)
        except Exception:
            log.exception("Map widget construction failed")
            self._requested = False
            return

        self._widget = widget
        self.generation += 1
        log.debug("Map widget #%d constructed", self.generation)

        for hook in self._ready_hooks:
            if self._widget is not widget:
                # A hook deactivated the view; the remaining setup is moot.
                return
            try:
                hook(widget)
            except Exception:
                log.exception("Map widget setup failed, tearing it down")
                self.deactivate()
                return


__all__ = ["MapLifecycle", "MapWidget", "WidgetFactory", "WidgetHook"]
