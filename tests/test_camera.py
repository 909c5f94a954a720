import math

import numpy as np
import pytest

from globesim.camera import (
    ORBITAL_CONTROL_RADIUS,
    PITCH_LIMIT,
    RAY_LENGTH,
    Camera,
    CameraInfo,
    CameraType,
    FreeCam,
    OrbitalCam,
    look_at,
    perspective,
)
from globesim.input import KEY_W, MOUSE_BUTTON_2, InputManager, InputType


def _pressed(*keys):
    def query(input_type, input_id):
        return (input_type, input_id) in keys

    return query


def test_camera_info_defaults():
    info = CameraInfo()
    assert np.allclose(info.position, [100, 0, 100])
    assert np.allclose(info.front, [0, 0, -1])
    assert info.is_ray_set is False


def test_camera_info_round_trip():
    cam = FreeCam(800, 600)
    cam.info.yaw = 30.0
    cam.info.pitch = -10.0
    cam.update_camera_vectors()
    data = cam.info.to_bytes()
    assert len(data) == 188
    restored = CameraInfo.from_bytes(data)
    assert restored.type is CameraType.FREECAM
    assert np.allclose(restored.view, cam.info.view, rtol=1e-5, atol=1e-4)
    assert np.allclose(restored.projection, cam.info.projection, rtol=1e-5, atol=1e-4)
    assert np.allclose(restored.front, cam.info.front, atol=1e-6)
    assert restored.yaw == pytest.approx(30.0)
    assert restored.pitch == pytest.approx(-10.0)


def test_camera_info_short_buffer():
    with pytest.raises(ValueError):
        CameraInfo.from_bytes(b"\x00" * 10)


def test_look_at_maps_eye_to_origin_and_target_ahead():
    eye = np.array([3.0, 4.0, 5.0])
    target = np.array([-1.0, 2.0, 0.0])
    view = look_at(eye, target, [0, 1, 0])
    assert np.allclose(view @ np.append(eye, 1.0), [0, 0, 0, 1])
    mapped = view @ np.append(target, 1.0)
    assert np.allclose(mapped[:2], [0, 0], atol=1e-9)
    assert mapped[2] < 0
    rotation = view[:3, :3]
    assert np.allclose(rotation @ rotation.T, np.identity(3))


def test_perspective_maps_planes_to_depth_range():
    proj = perspective(math.radians(45.0), 16 / 9, 10.0, 1000.0)
    near = proj @ np.array([0, 0, -10.0, 1.0])
    far = proj @ np.array([0, 0, -1000.0, 1.0])
    assert near[2] / near[3] == pytest.approx(-1.0)
    assert far[2] / far[3] == pytest.approx(1.0)


def test_perspective_rejects_zero_aspect():
    with pytest.raises(ValueError):
        perspective(1.0, 0.0, 1.0, 10.0)


def test_free_cam_vectors_orthonormal():
    cam = FreeCam(1920, 1080)
    cam.info.yaw = 40.0
    cam.info.pitch = 20.0
    cam.update_camera_vectors()
    info = cam.info
    assert np.linalg.norm(info.front) == pytest.approx(1.0)
    assert np.dot(info.front, info.right) == pytest.approx(0.0, abs=1e-9)
    assert np.dot(info.front, info.up) == pytest.approx(0.0, abs=1e-9)
    assert np.dot(info.right, info.up) == pytest.approx(0.0, abs=1e-9)


def test_free_cam_mouse_look_is_smoothed():
    cam = FreeCam(1920, 1080)
    cam.update(1060, 540, 1920, 1080)
    assert cam.info.yaw == pytest.approx(5.0)
    assert cam.info.pitch == pytest.approx(0.0)
    assert (cam.last_x, cam.last_y) == (1060.0, 540.0)


def test_free_cam_pitch_is_clamped():
    cam = FreeCam(1920, 1080)
    for k in range(200):
        cam.update(960, 540 - 1000 * (k + 1), 1920, 1080)
    assert cam.info.pitch <= PITCH_LIMIT
    assert cam.info.pitch > PITCH_LIMIT - 1


def test_free_cam_moves_along_axes():
    cam = FreeCam(800, 600)
    cam.update_camera_vectors()
    start = cam.info.position.copy()
    cam.move_forward()
    assert np.allclose(cam.info.position - start, cam.speed * cam.info.front)
    cam.move_backward()
    assert np.allclose(cam.info.position, start)
    cam.move_right()
    cam.move_up()
    assert np.allclose(
        cam.info.position - start, cam.speed * (cam.info.right + cam.info.up)
    )


def test_free_cam_toggle_freezes_movement_and_rays():
    cam = FreeCam(800, 600)
    cam.update_camera_vectors()
    assert cam.toggle_mouse_control() == (400.0, 300.0)
    assert cam.cursor_hidden is False
    start = cam.info.position.copy()
    cam.move_forward()
    assert np.allclose(cam.info.position, start)
    assert cam.calculate_ray() is None
    cam.toggle_mouse_control()
    assert cam.cursor_hidden is True


def test_free_cam_ray():
    cam = FreeCam(800, 600)
    cam.update_camera_vectors()
    ray = cam.calculate_ray()
    assert cam.info.is_ray_set is True
    assert cam.info.ray is ray
    assert np.allclose(ray.origin, cam.info.position)
    assert np.allclose(ray.direction, cam.info.front)
    assert np.allclose(ray.end, ray.origin + RAY_LENGTH * ray.direction)
    assert ray.line_vertices == pytest.approx([*ray.origin, *ray.end])


def test_free_cam_bindings_drive_camera():
    manager = InputManager()
    cam = FreeCam(800, 600)
    cam.update_camera_vectors()
    cam.bind_keys(manager)
    labels = manager.bound_keys()
    assert labels["Camera Move Foward"] == "W"
    assert labels["Toggle Free Camera"] == "ESCAPE"
    start = cam.info.position.copy()
    manager.process(_pressed((InputType.KEYBOARD, KEY_W)), 1.0)
    assert np.allclose(cam.info.position - start, cam.speed * cam.info.front)


def test_orbital_cam_stays_on_sphere():
    cam = OrbitalCam(1920, 1080)
    cam.info.yaw = 70.0
    cam.info.pitch = 30.0
    cam.set_radius(5000.0)
    pos = cam.info.position
    assert np.linalg.norm(pos) == pytest.approx(5000.0)
    assert np.allclose(cam.info.front, -pos / np.linalg.norm(pos))


def test_orbital_drag_clamps_pitch():
    cam = OrbitalCam(1920, 1080)
    cam.update(960, 540, 1920, 1080)
    cam.drag(960, 540 - 10000)
    assert cam.info.pitch == PITCH_LIMIT
    assert np.linalg.norm(cam.info.position) == pytest.approx(cam.radius)


def test_orbital_ray_through_centre_points_at_target():
    cam = OrbitalCam(1920, 1080)
    cam.info.yaw = 15.0
    cam.info.pitch = 10.0
    cam.set_radius(5000.0)
    ray = cam.calculate_ray(960, 540)
    assert np.allclose(ray.direction, cam.info.front, atol=1e-6)
    assert np.allclose(ray.origin, cam.info.position)


def test_orbital_drag_binding_uses_recorded_cursor():
    manager = InputManager()
    cam = OrbitalCam(1920, 1080)
    cam.bind_keys(manager)
    cam.update(960, 540, 1920, 1080)
    cam.move_cursor(1060, 540)
    manager.process(_pressed((InputType.MOUSE_BUTTON, MOUSE_BUTTON_2)), 1.0)
    assert cam.info.yaw == pytest.approx(10.0)
    assert set(manager.bound_keys()) == {"Primary Click", "Drag Camera"}


def test_camera_wrapper_orbital():
    camera = Camera(CameraType.ORBITAL, 800, 600)
    assert camera.radius() == ORBITAL_CONTROL_RADIUS
    assert camera.info().type is CameraType.ORBITAL
    camera.set_radius(3000.0)
    assert np.linalg.norm(camera.info().position) == pytest.approx(3000.0)


def test_camera_wrapper_free_binds_keys():
    manager = InputManager()
    camera = Camera(CameraType.FREECAM, 800, 600, manager)
    assert camera.info().type is CameraType.FREECAM
    assert "Camera Move Down" in manager.bound_keys()
    camera.update(500, 300, 800, 600)
    assert camera.info().yaw == pytest.approx(cam_yaw_after(500 - 960))


def cam_yaw_after(dx):
    cam = FreeCam(800, 600)
    cam.update(960 + dx, 540, 800, 600)
    return cam.info.yaw


def test_camera_rejects_unknown_type():
    with pytest.raises(ValueError):
        Camera(7, 800, 600)