"""The application lifecycle: initialise, run the frame loop, shut down."""

from __future__ import annotations

from typing import Optional

from metamorphic.logger import get_core_logger, init_logging
from metamorphic.scene import SceneManager
from metamorphic.window import HeadlessWindow, Window, WindowError, WindowProps


class ApplicationError(Exception):
    """Raised when the application cannot initialise."""


class Application:
    """Owns a window and a scene manager and drives them frame by frame.

    Subclasses override :meth:`after_initialized` and :meth:`before_shutdown`,
    and :meth:`create_window` to pick the window implementation.
    """

    def __init__(self) -> None:
        self.window: Optional[Window] = None
        self.scene_manager = SceneManager()

    def create_window(self, props: WindowProps) -> Window:
        """Return the window the application will open."""
        return HeadlessWindow(props)

    def init(self) -> None:
        """Set up logging and open the window; raise :class:`ApplicationError` on failure."""
        init_logging()
        logger = get_core_logger()
        self.window = self.create_window(WindowProps(1280, 720, "Hello World"))
        try:
            self.window.create()
        except WindowError as exc:
            logger.error("Failed to create window")
            raise ApplicationError("Failed to create window") from exc
        self.window.show()
        logger.info("Created Window")
        logger.info("Initialized")

    def update(self) -> None:
        self.scene_manager.update()

    def late_update(self) -> None:
        self.scene_manager.late_update()

    def draw(self) -> None:
        self.scene_manager.draw()

    def late_draw(self) -> None:
        self.scene_manager.late_draw()

    def run(self) -> bool:
        """Run until the window closes; return ``False`` if initialisation failed."""
        try:
            self.init()
        except ApplicationError:
            self.shutdown()
            return False
        self.after_initialized()
        while self.window is not None and self.window.is_created:
            self.update()
            self.late_update()
            self.draw()
            self.late_draw()
            self.window.update()
        self.before_shutdown()
        self.shutdown()
        return True

    def shutdown(self) -> None:
        """Clear the scenes and destroy the window."""
        logger = get_core_logger()
        logger.info("Shutting Down")
        self.scene_manager.shutdown()
        if self.window is not None:
            self.window.destroy()
            self.window = None
        logger.info("Shutdown")

    def after_initialized(self) -> None:
        """Called by :meth:`run` once initialisation has succeeded."""
        get_core_logger().debug("Entering frame loop")

    def before_shutdown(self) -> None:
        """Called by :meth:`run` before shutting down after a successful start."""
        get_core_logger().debug("Leaving frame loop")