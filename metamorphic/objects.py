"""Game objects and the components attached to them."""

from __future__ import annotations

from abc import ABC, abstractmethod

from metamorphic.events import EventDispatcher


class GameObject:
    """An object living in a scene.

    Each lifecycle hook is forwarded to the components in :attr:`components`;
    subclasses override the hooks they need.
    """

    def __init__(self) -> None:
        self.components: list[Component] = []

    def awake(self) -> None:
        """Called when the object is created; wakes and starts its components."""
        for component in self.components:
            component.awake()
            component.start()

    def update(self) -> None:
        """Called once per frame."""
        for component in self.components:
            component.update()

    def late_update(self) -> None:
        """Called after :meth:`update`."""
        for component in self.components:
            component.late_update()

    def draw(self) -> None:
        """Called after :meth:`late_update`."""
        for component in self.components:
            component.draw()

    def late_draw(self) -> None:
        """Called after :meth:`draw`."""
        for component in self.components:
            component.late_draw()


class Component(ABC):
    """Behaviour attached to a game object, with its own event dispatcher."""

    def __init__(self, game_object: GameObject) -> None:
        self.game_object = game_object
        self.event_dispatcher = EventDispatcher()

    @abstractmethod
    def awake(self) -> None:
        """Called when the component is created."""

    @abstractmethod
    def start(self) -> None:
        """Called after :meth:`awake`."""

    @abstractmethod
    def update(self) -> None:
        """Called once per frame."""

    @abstractmethod
    def late_update(self) -> None:
        """Called after :meth:`update`."""

    @abstractmethod
    def draw(self) -> None:
        """Called after :meth:`late_update`."""

    @abstractmethod
    def late_draw(self) -> None:
        """Called after :meth:`draw`."""