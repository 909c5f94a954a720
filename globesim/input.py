"""Key and mouse bindings polled once per frame."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable

KEY_SPACE = 32
KEY_A = 65
KEY_D = 68
KEY_S = 83
KEY_W = 87
KEY_ESCAPE = 256
KEY_LEFT_SHIFT = 340
KEY_LEFT_CONTROL = 341
KEY_LEFT_ALT = 342
MOUSE_BUTTON_1 = 0
MOUSE_BUTTON_2 = 1


def _build_key_names() -> dict[int, str]:
    names = {
        32: "SPACE", 39: "APOSTROPHE", 44: "COMMA", 45: "MINUS", 46: "PERIOD",
        47: "SLASH", 59: "SEMICOLON", 61: "EQUAL", 91: "LEFT_BRACKET",
        92: "BACKSLASH", 93: "RIGHT_BRACKET", 96: "GRAVE_ACCENT",
        161: "WORLD_1", 162: "WORLD_2", 256: "ESCAPE", 257: "ENTER", 258: "TAB",
        259: "BACKSPACE", 260: "INSERT", 261: "DELETE", 262: "RIGHT", 263: "LEFT",
        264: "DOWN", 265: "UP", 266: "PAGE_UP", 267: "PAGE_DOWN", 268: "HOME",
        269: "END", 280: "CAPS_LOCK", 281: "SCROLL_LOCK", 282: "NUM_LOCK",
        283: "PRINT_SCREEN", 284: "PAUSE", 330: "KP_DECIMAL", 331: "KP_DIVIDE",
        332: "KP_MULTIPLY", 333: "KP_SUBTRACT", 334: "KP_ADD", 335: "KP_ENTER",
        336: "KP_EQUAL", 340: "LEFT_SHIFT", 341: "LEFT_CONTROL", 342: "LEFT_ALT",
        343: "LEFT_SUPER", 344: "RIGHT_SHIFT", 345: "RIGHT_CONTROL",
        346: "RIGHT_ALT", 347: "RIGHT_SUPER", 348: "MENU",
    }
    names.update({48 + d: str(d) for d in range(10)})
    names.update({65 + i: chr(ord("A") + i) for i in range(26)})
    names.update({290 + i: f"F{i + 1}" for i in range(25)})
    names.update({320 + d: f"KP_{d}" for d in range(10)})
    return names


_KEY_NAMES = _build_key_names()
_MODIFIERS = frozenset({"LEFT_SHIFT", "LEFT_CONTROL", "LEFT_ALT"})


def key_name(key: int) -> str:
    """Printable name of a keyboard key code, or ``"UNKNOWN"``."""
    return _KEY_NAMES.get(key, "UNKNOWN")


def binding_label(key_ids: Iterable[int]) -> str:
    """Human-readable combination such as ``"LEFT_CONTROL + S"``.

    Left shift, control and alt come first in alphabetical order, then the
    other keys in the order given.
    """
    names = [key_name(key) for key in key_ids]
    modifiers = sorted(name for name in names if name in _MODIFIERS)
    others = [name for name in names if name not in _MODIFIERS]
    return " + ".join(modifiers + others)


class KeyDetectionAction(Enum):
    ON_PRESS = "on_press"
    ON_HOLD = "on_hold"


class InputType(Enum):
    KEYBOARD = "keyboard"
    MOUSE_BUTTON = "mouse_button"


PressedQuery = Callable[[InputType, int], bool]


@dataclass
class KeyProcessor:
    """One binding: a set of inputs that together fire an action."""

    input_ids: list[int]
    action: Callable[[], Any]
    detection_action: KeyDetectionAction
    input_type: InputType
    override_gui_focus: bool = False
    triggered: bool = field(default=False, init=False)

    def process(self, is_pressed: PressedQuery) -> bool:
        """Check the inputs and fire the action as the detection mode says.

        ``is_pressed(input_type, input_id)`` reports whether an input is down.
        Returns whether the binding is currently triggered.
        """
        all_pressed = all(is_pressed(self.input_type, i) for i in self.input_ids)

        if self.detection_action is KeyDetectionAction.ON_PRESS:
            if all_pressed and not self.triggered:
                self.action()
                self.triggered = True
            elif not all_pressed:
                self.triggered = False
        else:
            if all_pressed:
                self.action()
                self.triggered = True
            else:
                self.triggered = False
        return self.triggered


class InputManager:
    """Named bindings, processed in name order once per frame."""

    def __init__(self) -> None:
        self._processors: dict[str, KeyProcessor] = {}
        self._labels: dict[str, str] = {}
        self.active_camera: Any = None
        self.is_active_camera_set = False
        self.skip_processing = False
        self.delta_time = 0.0
        self.last_frame_time = 0.0

    def set_active_camera(self, camera: Any) -> None:
        self.active_camera = camera
        self.is_active_camera_set = True

    def add_binding(
        self,
        name: str,
        key_ids: Iterable[int],
        action: Callable[[], Any],
        detection_action: KeyDetectionAction,
        input_type: InputType,
        override_gui_focus: bool = False,
    ) -> None:
        """Add or replace the binding called ``name``."""
        processor = KeyProcessor(
            list(key_ids), action, detection_action, input_type, override_gui_focus
        )
        self._processors[name] = processor
        self._labels[name] = binding_label(processor.input_ids)

    def update_binding(self, name: str, key_ids: Iterable[int]) -> None:
        """Change the inputs of an existing binding; KeyError if unknown."""
        processor = self._processors[name]
        processor.input_ids = list(key_ids)
        self._labels[name] = binding_label(processor.input_ids)

    def remove_binding(self, name: str) -> None:
        """Stop processing ``name``; its label stays in ``bound_keys``."""
        self._processors.pop(name, None)

    def bound_keys(self) -> dict[str, str]:
        """Binding names mapped to their key labels, sorted by name."""
        return dict(sorted(self._labels.items()))

    def process(
        self,
        is_pressed: PressedQuery,
        current_time: float,
        gui_wants_mouse: bool = False,
    ) -> float:
        """Run one frame of input handling and return the frame's delta time.

        Bindings that do not override GUI focus are skipped while the GUI
        wants the mouse. The active camera is updated by the caller, which
        holds the window state it needs.
        """
        self.delta_time = current_time - self.last_frame_time
        self.last_frame_time = current_time
        if self.skip_processing:
            return self.delta_time

        for _, processor in sorted(self._processors.items()):
            if not processor.override_gui_focus and gui_wants_mouse:
                continue
            processor.process(is_pressed)
        return self.delta_time