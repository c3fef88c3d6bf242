"""Scenes and the manager that drives them."""

from __future__ import annotations

from enum import IntEnum
from typing import Iterator, List, Optional, Type, TypeVar


class SceneBuildIndex(IntEnum):
    NONE = 0
    MAIN_MENU = 1


class Scene:
    """A default scene; subclasses override the lifecycle hooks they need.

    The default hooks record the last lifecycle stage reached in ``stage``
    and count the frames seen by :meth:`update` in ``frames``.
    """

    def __init__(self, name: str = "Scene", build_index: SceneBuildIndex = SceneBuildIndex.NONE) -> None:
        self.name = name
        self.build_index = build_index
        self.stage: Optional[str] = None
        self.frames = 0

    def awake(self) -> None:
        """Called when the scene is created."""
        self.stage = "awake"

    def start(self) -> None:
        """Called right after :meth:`awake`."""
        self.stage = "start"

    def update(self) -> None:
        """Called once per frame."""
        self.frames += 1
        self.stage = "update"

    def late_update(self) -> None:
        """Called after :meth:`update`."""
        self.stage = "late_update"

    def draw(self) -> None:
        """Called after :meth:`late_update`."""
        self.stage = "draw"

    def late_draw(self) -> None:
        """Called after :meth:`draw`."""
        self.stage = "late_draw"


S = TypeVar("S", bound=Scene)


class SceneManager:
    """Holds the active scenes and forwards the frame hooks to each in order."""

    def __init__(self) -> None:
        self._scenes: List[Scene] = []

    def init(self) -> None:
        self._scenes.clear()

    def shutdown(self) -> None:
        self._scenes.clear()

    def _each(self) -> Iterator[Scene]:
        return iter(list(self._scenes))

    def update(self) -> None:
        for scene in self._each():
            scene.update()

    def late_update(self) -> None:
        for scene in self._each():
            scene.late_update()

    def draw(self) -> None:
        for scene in self._each():
            scene.draw()

    def late_draw(self) -> None:
        for scene in self._each():
            scene.late_draw()

    def create_scene(self, scene_class: Type[S] = Scene, *args, **kwargs) -> S:
        """Build a scene, call its ``awake`` and ``start``, then add it to the list."""
        scene = scene_class(*args, **kwargs)
        scene.awake()
        scene.start()
        self._scenes.append(scene)
        return scene

    def _index_of(self, scene: Scene) -> Optional[int]:
        return next((i for i, held in enumerate(self._scenes) if held is scene), None)

    def remove_scene(self, scene: Scene) -> bool:
        """Remove ``scene`` if it is held; return whether it was."""
        index = self._index_of(scene)
        if index is None:
            return False
        del self._scenes[index]
        return True

    def delete_scene(self, scene: Scene) -> bool:
        """Remove ``scene`` and drop the manager's ownership of it."""
        return self.remove_scene(scene)

    def get_scene_by_build_index(self, index: SceneBuildIndex) -> Optional[Scene]:
        """Return the first scene with build index ``index``, or ``None``."""
        return next((s for s in self._scenes if s.build_index == index), None)

    def get_scene_by_name(self, name: str) -> Optional[Scene]:
        """Return the first scene called ``name``, or ``None``."""
        return next((s for s in self._scenes if s.name == name), None)

    def __len__(self) -> int:
        return len(self._scenes)