import pytest

from globesim.input import (
    KEY_A,
    KEY_LEFT_CONTROL,
    KEY_LEFT_SHIFT,
    KEY_SPACE,
    KEY_W,
    MOUSE_BUTTON_1,
    InputManager,
    InputType,
    KeyDetectionAction,
    KeyProcessor,
    binding_label,
    key_name,
)


def pressed(*keys):
    down = set(keys)
    return lambda input_type, input_id: input_id in down


def nothing_pressed(input_type, input_id):
    return False


def test_key_names():
    assert key_name(KEY_A) == "A"
    assert key_name(KEY_SPACE) == "SPACE"
    assert key_name(KEY_LEFT_SHIFT) == "LEFT_SHIFT"
    assert key_name(-5) == "UNKNOWN"


def test_binding_label_puts_modifiers_first_sorted():
    label = binding_label([KEY_A, KEY_LEFT_SHIFT, KEY_LEFT_CONTROL])
    assert label == "LEFT_CONTROL + LEFT_SHIFT + A"


def test_binding_label_empty():
    assert binding_label([]) == ""


def test_on_press_fires_once_while_held():
    calls = []
    proc = KeyProcessor([KEY_W], lambda: calls.append(1),
                        KeyDetectionAction.ON_PRESS, InputType.KEYBOARD)
    assert proc.process(pressed(KEY_W)) is True
    assert proc.process(pressed(KEY_W)) is True
    assert len(calls) == 1
    assert proc.process(nothing_pressed) is False
    proc.process(pressed(KEY_W))
    assert len(calls) == 2


def test_on_hold_fires_every_frame():
    calls = []
    proc = KeyProcessor([KEY_W], lambda: calls.append(1),
                        KeyDetectionAction.ON_HOLD, InputType.KEYBOARD)
    for _ in range(3):
        proc.process(pressed(KEY_W))
    assert len(calls) == 3
    assert proc.process(nothing_pressed) is False


def test_combination_requires_all_inputs():
    calls = []
    proc = KeyProcessor([KEY_LEFT_SHIFT, KEY_A], lambda: calls.append(1),
                        KeyDetectionAction.ON_PRESS, InputType.KEYBOARD)
    proc.process(pressed(KEY_A))
    assert calls == []
    proc.process(pressed(KEY_A, KEY_LEFT_SHIFT))
    assert calls == [1]


def test_input_type_is_passed_to_query():
    seen = []

    def query(input_type, input_id):
        seen.append((input_type, input_id))
        return True

    proc = KeyProcessor([MOUSE_BUTTON_1], lambda: None,
                        KeyDetectionAction.ON_PRESS, InputType.MOUSE_BUTTON)
    assert proc.process(query) is True
    assert seen == [(InputType.MOUSE_BUTTON, MOUSE_BUTTON_1)]


def test_manager_bound_keys_sorted_by_name():
    manager = InputManager()
    manager.add_binding("Zoom", [KEY_W], lambda: None,
                        KeyDetectionAction.ON_HOLD, InputType.KEYBOARD)
    manager.add_binding("Attack", [KEY_LEFT_SHIFT, KEY_A], lambda: None,
                        KeyDetectionAction.ON_PRESS, InputType.KEYBOARD)
    assert list(manager.bound_keys()) == ["Attack", "Zoom"]
    assert manager.bound_keys()["Attack"] == "LEFT_SHIFT + A"


def test_update_binding_changes_inputs_and_label():
    calls = []
    manager = InputManager()
    manager.add_binding("Jump", [KEY_W], lambda: calls.append(1),
                        KeyDetectionAction.ON_PRESS, InputType.KEYBOARD)
    manager.update_binding("Jump", [KEY_SPACE])
    assert manager.bound_keys()["Jump"] == "SPACE"
    manager.process(pressed(KEY_W), 1.0)
    assert calls == []
    manager.process(pressed(KEY_SPACE), 2.0)
    assert calls == [1]


def test_update_unknown_binding_raises():
    manager = InputManager()
    with pytest.raises(KeyError):
        manager.update_binding("Missing", [KEY_A])


def test_remove_binding_stops_processing():
    calls = []
    manager = InputManager()
    manager.add_binding("Jump", [KEY_W], lambda: calls.append(1),
                        KeyDetectionAction.ON_HOLD, InputType.KEYBOARD)
    manager.remove_binding("Jump")
    manager.process(pressed(KEY_W), 1.0)
    assert calls == []


def test_gui_focus_skips_non_overriding_bindings():
    calls = []
    manager = InputManager()
    manager.add_binding("Plain", [KEY_W], lambda: calls.append("plain"),
                        KeyDetectionAction.ON_HOLD, InputType.KEYBOARD, False)
    manager.add_binding("Forced", [KEY_W], lambda: calls.append("forced"),
                        KeyDetectionAction.ON_HOLD, InputType.KEYBOARD, True)
    manager.process(pressed(KEY_W), 1.0, gui_wants_mouse=True)
    assert calls == ["forced"]


def test_process_returns_delta_time():
    manager = InputManager()
    manager.process(nothing_pressed, 1.0)
    assert manager.process(nothing_pressed, 1.5) == pytest.approx(0.5)
    assert manager.last_frame_time == 1.5


def test_skip_processing_suppresses_actions_but_tracks_time():
    calls = []
    manager = InputManager()
    manager.add_binding("Jump", [KEY_W], lambda: calls.append(1),
                        KeyDetectionAction.ON_HOLD, InputType.KEYBOARD)
    manager.skip_processing = True
    delta = manager.process(pressed(KEY_W), 2.0)
    assert calls == []
    assert delta == pytest.approx(2.0)


def test_set_active_camera():
    manager = InputManager()
    camera = object()
    manager.set_active_camera(camera)
    assert manager.active_camera is camera
    assert manager.is_active_camera_set is True