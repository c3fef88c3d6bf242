# metamorphic

A small framework for building game-style applications. It contains:

- `metamorphic.application`: `Application`, which owns a window and a
  `SceneManager`. `run()` calls `init()`, then `after_initialized()`, then
  calls `update`, `late_update`, `draw` and `late_draw` on the scenes and
  `update()` on the window once per frame until the window is no longer
  created. After that it calls `before_shutdown()` and `shutdown()`. `run()`
  returns `False` if initialisation failed (the window raised `WindowError`)
  and `True` otherwise. Override `create_window(props)` to use a different
  `Window`. By default it is a `HeadlessWindow` of 1280x720 titled
  "Hello World".
- `metamorphic.scene`: `Scene` (lifecycle hooks `awake`, `start`, `update`,
  `late_update`, `draw`, `late_draw`, plus `name`, `build_index`, `stage` and
  `frames`), `SceneBuildIndex`, and `SceneManager`. The manager has
  `create_scene`, `remove_scene`, `delete_scene`, `get_scene_by_name` and
  `get_scene_by_build_index`.
- `metamorphic.window`: `WindowProps`, the abstract `Window`, `WindowError` with
  its `WindowErrorCode`, and `HeadlessWindow`. `HeadlessWindow` centres itself
  on a virtual 1920x1080 screen and counts frames in `frame_count`. A width or
  height of `FULLSCREEN` (-1) becomes the screen size. `close()` ends the
  application loop.
- `metamorphic.objects`: `GameObject`, which forwards its lifecycle hooks to
  its `components`, and the abstract `Component`, which has its own
  `event_dispatcher`.
- `metamorphic.events`: `EventType`, `Event`, `ApplicationExitEvent` and
  `EventDispatcher`, which holds one callback per event type. Also the
  thread-safe `ThreadEventHandler`, which queues callables, and
  `ThreadEventRelay`, which queues events for a dispatcher. Each of these two
  processes its queue when `handle_events()` is called on the thread you choose.
- `metamorphic.memory`: `BaseQueue` (FIFO) and `BaseStack` (LIFO). Both accept
  only instances of a given base class and raise `TypeError` for anything else.
- `metamorphic.resources`: `ResourceManager`, which reads and writes named
  binary resources. The data lives in a resources file (`.cpr`) and the names
  in an index map file (`.cprm`). Failures raise `ResourceError`, and its
  `code` attribute holds a `ResourceErrorCode`.
- `metamorphic.logger`: `init_logging()`, `get_core_logger()` and
  `get_sandbox_logger()`. These are the "Core" and "Sandbox" loggers. They
  print every level to standard output as `[HH:MM:SS] Name: message`, and
  colour the output when standard output is a terminal.

## Installation

```
pip install .
```

## Example

With a `HeadlessWindow` the loop runs until something calls `window.close()`:

```python
from metamorphic.application import Application
from metamorphic.scene import Scene


class SandboxApp(Application):
    def after_initialized(self):
        self.scene = self.scene_manager.create_scene(Scene, "Main")

    def late_draw(self):
        super().late_draw()
        if self.scene.frames >= 3:
            self.window.close()


SandboxApp().run()
```

## Resources

Names are strings and data is bytes. The map path is given without an
extension. `.cprm` and `.cpr` are added to it, and missing files are created.

```python
from metamorphic.resources import ResourceManager

with ResourceManager("game") as manager:
    manager.start_saving()
    manager.append_resource("greeting", b"hello")

data = ResourceManager("game").load_resource("greeting")  # b"hello"
```

If you append under a name that already exists, the old data is replaced.
`create_resource(cls, name)` builds `cls()` and then passes the stored bytes to
its `load_resource(data)` method. Set `load_whole_buffer=True` to read the
whole resources file into memory the first time a resource is loaded.

## What it does not do

The package opens no real on-screen window and renders nothing.
`HeadlessWindow` is the only window it provides. For an actual display or
input, subclass `Window` and return your window from
`Application.create_window`. The package installs no command-line program.

## Tests

```
pip install .[test]
pytest
```