"""Window geometry, window errors and the window interface."""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

FULLSCREEN = -1


@dataclass
class WindowProps:
    """Position, size and title of a window; a size of ``FULLSCREEN`` fills the screen."""

    width: int = FULLSCREEN
    height: int = FULLSCREEN
    title: str = ""
    x: int = 0
    y: int = 0


class WindowErrorCode(IntEnum):
    NONE = 0
    ALREADY_CREATED = 1
    INVALID_HANDLE = 2
    FAILED_TO_CREATE_WIDE_STRING = 3
    FAILED_TO_SET_PIXEL_FORMAT = 4


class WindowError(Exception):
    """Raised when a window operation fails."""

    def __init__(self, code: WindowErrorCode, message: Optional[str] = None) -> None:
        super().__init__(message or code.name.replace("_", " ").lower())
        self.code = code


class Window(ABC):
    """Interface every platform window implements."""

    def __init__(self, props: Optional[WindowProps] = None) -> None:
        self.props = dataclasses.replace(props) if props is not None else WindowProps()
        self.is_created = False
        self.is_showing = False

    @abstractmethod
    def create(self) -> None:
        """Open the window; raise :class:`WindowError` on failure."""

    @abstractmethod
    def destroy(self) -> None:
        """Close the window and release what it holds."""

    @abstractmethod
    def update(self) -> None:
        """Process pending window messages and present the frame."""

    @abstractmethod
    def show(self) -> None:
        """Make the window visible."""

    @abstractmethod
    def hide(self) -> None:
        """Make the window invisible."""


class HeadlessWindow(Window):
    """A window with no display behind it, centred on a virtual screen."""

    screen_size: Tuple[int, int] = (1920, 1080)

    frame_count: int = 0

    def create(self) -> None:
        """Resolve full-screen sizes, centre the window and mark it created."""
        if self.is_created:
            raise WindowError(WindowErrorCode.ALREADY_CREATED)
        screen_width, screen_height = self.screen_size
        if self.props.width == FULLSCREEN:
            self.props.width = screen_width
        if self.props.height == FULLSCREEN:
            self.props.height = screen_height
        self.props.x = int((screen_width - self.props.width) / 2)
        self.props.y = int((screen_height - self.props.height) / 2)
        self.frame_count = 0
        self.is_created = True

    def destroy(self) -> None:
        """Mark the window closed and hidden; does nothing if never created."""
        if not self.is_created:
            return
        self.is_showing = False
        self.is_created = False

    def update(self) -> None:
        """Count one presented frame."""
        if self.is_created:
            self.frame_count += 1

    def show(self) -> None:
        if self.is_created:
            self.is_showing = True

    def hide(self) -> None:
        if self.is_created:
            self.is_showing = False

    def close(self) -> None:
        """Act on a close request, as when the user closes the window."""
        self.destroy()