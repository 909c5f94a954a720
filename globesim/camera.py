"""Free-flying and orbital cameras with their view, projection and picking rays."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Sequence

import numpy as np

from globesim.geometry import Ray
from globesim.input import (
    KEY_A,
    KEY_D,
    KEY_ESCAPE,
    KEY_LEFT_SHIFT,
    KEY_S,
    KEY_SPACE,
    KEY_W,
    MOUSE_BUTTON_1,
    MOUSE_BUTTON_2,
    InputManager,
    InputType,
    KeyDetectionAction,
)

RAY_LENGTH = 10000000.0
"""How far a picking ray's drawn line reaches."""
FIELD_OF_VIEW_DEGREES = 45.0
FAR_PLANE = 10000000.0
FREE_CAM_NEAR_PLANE = 10.0
ORBITAL_CAM_NEAR_PLANE = 1000.0
ORBITAL_CONTROL_RADIUS = 7000.0
"""Radius an orbital camera is given when its controls are set up."""
PITCH_LIMIT = 89.0

_DEFAULT_RADIUS = 20000.0
_DEFAULT_CURSOR = (1920.0 / 2.0, 1080.0 / 2.0)
_WORLD_UP = np.array([0.0, 1.0, 0.0])
_SERIAL_FORMAT = "<44fi2f"


class CameraType(IntEnum):
    ORBITAL = 0
    FREECAM = 1


def _vec3(values: Sequence[float] | np.ndarray) -> np.ndarray:
    arr = np.array(values, dtype=float)
    if arr.shape != (3,):
        raise ValueError("expected a 3-component vector")
    return arr


def _normalize(v: np.ndarray) -> np.ndarray:
    with np.errstate(invalid="ignore", divide="ignore"):
        return v / np.linalg.norm(v)


def look_at(eye, target, up) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` towards ``target``."""
    eye, target, up = _vec3(eye), _vec3(target), _vec3(up)
    f = _normalize(target - eye)
    s = _normalize(np.cross(f, up))
    u = np.cross(s, f)
    view = np.identity(4)
    view[0, :3] = s
    view[1, :3] = u
    view[2, :3] = -f
    view[0, 3] = -np.dot(s, eye)
    view[1, 3] = -np.dot(u, eye)
    view[2, 3] = np.dot(f, eye)
    return view


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection mapping depth to [-1, 1]."""
    if aspect == 0:
        raise ValueError("aspect ratio must be non-zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fovy / 2.0)
    projection = np.zeros((4, 4))
    projection[0, 0] = 1.0 / (aspect * tan_half)
    projection[1, 1] = 1.0 / tan_half
    projection[2, 2] = -(far + near) / (far - near)
    projection[2, 3] = -(2.0 * far * near) / (far - near)
    projection[3, 2] = -1.0
    return projection


@dataclass(eq=False)
class CameraInfo:
    """Camera state shared with the renderer."""

    position: np.ndarray = field(default_factory=lambda: np.array([100.0, 0.0, 100.0]))
    front: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, -1.0]))
    up: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    right: np.ndarray = field(default_factory=lambda: np.zeros(3))
    view: np.ndarray = field(default_factory=lambda: np.identity(4))
    projection: np.ndarray = field(default_factory=lambda: np.identity(4))
    type: CameraType = CameraType.ORBITAL
    is_ray_set: bool = False
    ray: Ray | None = None
    yaw: float = 0.0
    pitch: float = 0.0

    def to_bytes(self) -> bytes:
        """Little-endian single-precision record; matrices column by column."""
        floats = [
            *self.position,
            *self.front,
            *self.up,
            *self.right,
            *np.asarray(self.view).flatten(order="F"),
            *np.asarray(self.projection).flatten(order="F"),
        ]
        return struct.pack(
            _SERIAL_FORMAT, *(float(v) for v in floats), int(self.type), self.yaw, self.pitch
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "CameraInfo":
        """Rebuild a record written by ``to_bytes``; ValueError if malformed."""
        try:
            values = struct.unpack_from(_SERIAL_FORMAT, data)
        except struct.error as exc:
            raise ValueError(f"camera record too short: {exc}") from None
        floats = np.array(values[:44], dtype=float)
        return cls(
            position=floats[0:3],
            front=floats[3:6],
            up=floats[6:9],
            right=floats[9:12],
            view=floats[12:28].reshape((4, 4), order="F"),
            projection=floats[28:44].reshape((4, 4), order="F"),
            type=CameraType(values[44]),
            yaw=values[45],
            pitch=values[46],
        )


class _CameraBase:
    def __init__(self, width: int, height: int, camera_type: CameraType) -> None:
        self.width = width
        self.height = height
        self.radius = _DEFAULT_RADIUS
        self.central_point = np.zeros(3)
        self.last_x, self.last_y = _DEFAULT_CURSOR
        self.info = CameraInfo(type=camera_type)

    def _aspect(self) -> float:
        if self.height == 0:
            raise ValueError("window height must be non-zero")
        return self.width / self.height

    def set_radius(self, value: float) -> None:
        self.radius = float(value)
        self.update_camera_vectors()

    def update_camera_vectors(self) -> None:  # pragma: no cover - overridden
        raise NotImplementedError

    def _cast_ray(self, direction: np.ndarray) -> Ray:
        origin = np.array(self.info.position, dtype=float)
        end = origin + RAY_LENGTH * direction
        ray = Ray(
            origin=origin,
            direction=direction,
            end=end,
            line_vertices=[float(v) for v in (*origin, *end)],
        )
        self.info.is_ray_set = True
        self.info.ray = ray
        return ray


class FreeCam(_CameraBase):
    """First-person camera steered by mouse look and movement keys."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(width, height, CameraType.FREECAM)
        self.speed = 50.0
        self.smoothing = 0.1
        self.smoothed_yaw = 0.0
        self.smoothed_pitch = 0.0
        self.mouse_control_enabled = False

    @property
    def cursor_hidden(self) -> bool:
        """Whether the cursor should be hidden and locked to the window."""
        return not self.mouse_control_enabled

    def update(self, cursor_x: float, cursor_y: float, width: int, height: int) -> None:
        """Take the window size and, while looking around, the cursor movement."""
        self.width, self.height = width, height
        if not self.mouse_control_enabled:
            self._look(cursor_x, cursor_y)

    def _look(self, cursor_x: float, cursor_y: float) -> None:
        sensitivity = 0.5
        x_offset = (cursor_x - self.last_x) * sensitivity
        y_offset = (self.last_y - cursor_y) * sensitivity
        self.last_x, self.last_y = float(cursor_x), float(cursor_y)

        new_yaw = self.info.yaw + x_offset
        new_pitch = min(max(self.info.pitch + y_offset, -PITCH_LIMIT), PITCH_LIMIT)

        k = self.smoothing
        self.smoothed_yaw = (1.0 - k) * self.smoothed_yaw + k * new_yaw
        self.smoothed_pitch = (1.0 - k) * self.smoothed_pitch + k * new_pitch
        self.info.yaw = self.smoothed_yaw
        self.info.pitch = self.smoothed_pitch
        self.update_camera_vectors()

    def update_camera_vectors(self) -> None:
        yaw, pitch = math.radians(self.info.yaw), math.radians(self.info.pitch)
        front = np.array(
            [math.cos(yaw) * math.cos(pitch), math.sin(pitch), math.sin(yaw) * math.cos(pitch)]
        )
        info = self.info
        info.front = _normalize(front)
        info.right = _normalize(np.cross(info.front, _WORLD_UP))
        info.up = _normalize(np.cross(info.right, info.front))
        info.view = look_at(info.position, info.position + info.front, info.up)
        info.projection = perspective(
            math.radians(FIELD_OF_VIEW_DEGREES), self._aspect(), FREE_CAM_NEAR_PLANE, FAR_PLANE
        )

    def calculate_ray(self) -> Ray | None:
        """Cast a ray straight ahead; None while the cursor is free."""
        if self.mouse_control_enabled:
            return None
        return self._cast_ray(_normalize(np.array(self.info.front, dtype=float)))

    def _move(self, direction: np.ndarray, sign: float) -> None:
        if not self.mouse_control_enabled:
            self.info.position = self.info.position + sign * self.speed * direction

    def move_forward(self) -> None:
        self._move(self.info.front, 1.0)

    def move_backward(self) -> None:
        self._move(self.info.front, -1.0)

    def move_left(self) -> None:
        self._move(self.info.right, -1.0)

    def move_right(self) -> None:
        self._move(self.info.right, 1.0)

    def move_up(self) -> None:
        self._move(self.info.up, 1.0)

    def move_down(self) -> None:
        self._move(self.info.up, -1.0)

    def toggle_mouse_control(self) -> tuple[float, float]:
        """Switch between mouse look and a free cursor.

        Returns where the cursor should be placed.
        """
        self.mouse_control_enabled = not self.mouse_control_enabled
        if self.mouse_control_enabled:
            self.last_x = self.width / 2.0
            self.last_y = self.height / 2.0
        return self.last_x, self.last_y

    def bind_keys(self, input_manager: InputManager) -> None:
        bindings = [
            ("Primary Click", MOUSE_BUTTON_1, self.calculate_ray,
             KeyDetectionAction.ON_PRESS, InputType.MOUSE_BUTTON),
            ("Camera Move Foward", KEY_W, self.move_forward,
             KeyDetectionAction.ON_HOLD, InputType.KEYBOARD),
            ("Camera Move Backwards", KEY_S, self.move_backward,
             KeyDetectionAction.ON_HOLD, InputType.KEYBOARD),
            ("Camera Move Left", KEY_A, self.move_left,
             KeyDetectionAction.ON_HOLD, InputType.KEYBOARD),
            ("Camera Move Right", KEY_D, self.move_right,
             KeyDetectionAction.ON_HOLD, InputType.KEYBOARD),
            ("Camera Move Up", KEY_SPACE, self.move_up,
             KeyDetectionAction.ON_HOLD, InputType.KEYBOARD),
            ("Camera Move Down", KEY_LEFT_SHIFT, self.move_down,
             KeyDetectionAction.ON_HOLD, InputType.KEYBOARD),
            ("Toggle Free Camera", KEY_ESCAPE, self.toggle_mouse_control,
             KeyDetectionAction.ON_PRESS, InputType.KEYBOARD),
        ]
        for name, key, action, detection, input_type in bindings:
            input_manager.add_binding(name, [key], action, detection, input_type, True)


class OrbitalCam(_CameraBase):
    """Camera circling a central point, dragged with the mouse."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(width, height, CameraType.ORBITAL)
        self.cursor = _DEFAULT_CURSOR

    def move_cursor(self, cursor_x: float, cursor_y: float) -> None:
        """Record the current cursor position for bound actions."""
        self.cursor = (float(cursor_x), float(cursor_y))

    def update(self, cursor_x: float, cursor_y: float, width: int, height: int) -> None:
        """Take the window size and remember the cursor as the drag origin."""
        self.width, self.height = width, height
        self.move_cursor(cursor_x, cursor_y)
        self.last_x, self.last_y = float(cursor_x), float(cursor_y)

    def drag(self, cursor_x: float, cursor_y: float) -> None:
        """Rotate around the central point by the cursor's movement."""
        sensitivity = 0.1
        x_offset = (cursor_x - self.last_x) * sensitivity
        y_offset = (self.last_y - cursor_y) * sensitivity
        self.info.yaw += x_offset
        self.info.pitch = min(max(self.info.pitch + y_offset, -PITCH_LIMIT), PITCH_LIMIT)
        self.update_camera_vectors()

    def update_camera_vectors(self) -> None:
        yaw, pitch = math.radians(self.info.yaw), math.radians(self.info.pitch)
        c = self.central_point
        position = np.array(
            [
                c[0] + self.radius * math.cos(yaw) * math.cos(pitch),
                c[1] + self.radius * math.sin(pitch),
                c[2] + self.radius * math.sin(yaw) * math.cos(pitch),
            ]
        )
        self.info.position = position
        self.info.front = _normalize(c - position)
        self.info.view = look_at(position, np.zeros(3), _WORLD_UP)
        self.info.projection = perspective(
            math.radians(FIELD_OF_VIEW_DEGREES),
            self._aspect(),
            ORBITAL_CAM_NEAR_PLANE,
            FAR_PLANE,
        )

    def calculate_ray(self, cursor_x: float | None = None, cursor_y: float | None = None) -> Ray:
        """Cast a ray through the cursor; defaults to the recorded cursor."""
        if cursor_x is None or cursor_y is None:
            cursor_x, cursor_y = self.cursor
        if self.width == 0 or self.height == 0:
            raise ValueError("window size must be non-zero")
        x = (2.0 * cursor_x) / self.width - 1.0
        y = 1.0 - (2.0 * cursor_y) / self.height
        clip = np.array([x, y, 1.0, 1.0])
        eye = np.linalg.inv(self.info.projection) @ clip
        eye = np.array([eye[0], eye[1], -1.0, 0.0])
        world = (np.linalg.inv(self.info.view) @ eye)[:3]
        return self._cast_ray(_normalize(world))

    def bind_keys(self, input_manager: InputManager) -> None:
        input_manager.add_binding(
            "Primary Click", [MOUSE_BUTTON_1], self.calculate_ray,
            KeyDetectionAction.ON_PRESS, InputType.MOUSE_BUTTON, False,
        )
        input_manager.add_binding(
            "Drag Camera", [MOUSE_BUTTON_2], lambda: self.drag(*self.cursor),
            KeyDetectionAction.ON_HOLD, InputType.MOUSE_BUTTON, False,
        )


class Camera:
    """The active camera of either kind, with its controls bound."""

    def __init__(
        self,
        camera_type: CameraType,
        width: int,
        height: int,
        input_manager: InputManager | None = None,
    ) -> None:
        camera_type = CameraType(camera_type)
        if camera_type is CameraType.ORBITAL:
            impl: FreeCam | OrbitalCam = OrbitalCam(width, height)
            impl.radius = ORBITAL_CONTROL_RADIUS
        else:
            impl = FreeCam(width, height)
        self.impl = impl
        if input_manager is not None:
            impl.bind_keys(input_manager)

    def update(self, cursor_x: float, cursor_y: float, width: int, height: int) -> None:
        self.impl.update(cursor_x, cursor_y, width, height)

    def info(self) -> CameraInfo:
        return self.impl.info

    def radius(self) -> float:
        return self.impl.radius

    def set_radius(self, value: float) -> None:
        self.impl.set_radius(value)