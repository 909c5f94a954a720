# globesim

The simulation side of a globe viewer, written in plain Python on top of
numpy. The package works out what should be drawn and where, and it keeps
that state. Drawing is your job.

## What is inside

- `globesim.perlin.PerlinNoise` gives seeded Perlin noise. Use `noise(x, y, z)` for 3D and `noise2d(x, y)` for 2D.
- `globesim.planar_terrain` holds `PlanarTerrainSettings` and `generate_planar_terrain(settings)`. The function returns `(vertices, indices)`. Each vertex is six floats: x, height, z, then the normal. There are three indices per triangle.
- `globesim.orbit` covers circular orbits around the Earth:
  - `orbital_speed` and `orbital_period`
  - `position_in_orbit`
  - `position_at_time`, which takes milliseconds since the epoch
  - `generate_orbit_trajectory`, which returns line segments of six floats each
- `globesim.geometry` defines `BoundingBox`, `Triangle`, `BVHNode` and `Ray`.
- `globesim.bvh` builds a bounding volume hierarchy with SAH and spatial-median splits. It also has:
  - `ray_intersects_bounding_box` for ray/box slab tests
  - `bvh_leaf_lines` for the edge lines of the leaf boxes
- `globesim.model_manager.ModelManager` stores meshes from interleaved vertex data under stable ids from `model_id(name)`. The vertex data is eight floats per vertex: position, normal, texture coordinates. A BVH is built for each mesh.
- `globesim.components` has these classes:
  - `PositionComponent`, `VelocityComponent`, `TransformComponent` and `CircularOrbitComponent`
  - `RenderTransferData` and `RenderBatch`, which hold the per-model draw data
- `globesim.ecs` has `Registry` and `Entity`, a small entity-component store with `view(*types)`.
- `globesim.orbit_system.OrbitSystem` moves every entity that has position, orbit and transform components. It returns draw batches grouped by model and a list of `ChunkMove` records.
- `globesim.camera` has `FreeCam`, `OrbitalCam` and the `Camera` wrapper:
  - they produce view and projection matrices through `look_at` and `perspective`
  - they cast pick rays
  - `CameraInfo` serialises to bytes with `to_bytes` and back with `from_bytes`
- `globesim.input.InputManager` keeps named bindings that fire either on press or while held. `binding_label` gives a readable key combination.
- Utilities:
  - `CappedDeque`
  - `Logger`, which keeps entries in memory, newest first
  - `Stopwatch`
  - `DoubleBuffer`
  - `LockedMap`
  - `ThreadPool`, which is also a context manager
  - `ThreadWrapper`

## Installing

```
pip install .
```

## Examples

Noise and orbits:

```python
from globesim.perlin import PerlinNoise
from globesim.orbit import G, M, orbital_period, generate_orbit_trajectory

noise = PerlinNoise(42)
height = noise.noise2d(1.5, 2.25)

period = orbital_period(G, M, 7.0e6)
segments = generate_orbit_trajectory(7.0e6, 0.5, 0.0)
```

Orbiting entities:

```python
from globesim.ecs import Registry
from globesim.components import (
    CircularOrbitComponent, PositionComponent, TransformComponent,
)
from globesim.orbit_system import OrbitSystem

registry = Registry()
satellite = registry.create()
satellite.add_component(PositionComponent())
satellite.add_component(CircularOrbitComponent(7000.0, 0.3, 0.0))
satellite.add_component(TransformComponent(model_id=1))

batches, moves = OrbitSystem(chunk_size=100).update(
    registry, now_ms=0, camera_chunk=(0, 0, 0)
)
```

Input and a camera:

```python
from globesim.input import InputManager
from globesim.camera import Camera, CameraType

manager = InputManager()
camera = Camera(CameraType.FREECAM, 1280, 720, manager)

pressed = {87}  # W held down
manager.process(lambda kind, key: key in pressed, current_time=0.016)
camera.update(640, 360, 1280, 720)
view = camera.info().view
```

A thread pool:

```python
from globesim.thread_pool import ThreadPool

with ThreadPool(4) as pool:
    pool.submit(lambda: print("working"))
    pool.wait_all()
```

## What it does not do

- It has no window, no GPU rendering and no GUI.
- Input state, cursor position and window size come from your own windowing code. You pass them into `InputManager.process` and into the cameras' `update` methods.
- `InputManager.process` does not update the camera. Call `Camera.update` yourself each frame.
- `ModelManager` does not read model files. It accepts only vertex and index data that has already been loaded.
- Chunk membership is not stored. `OrbitSystem.update` reports the changes as `ChunkMove` records, and you keep track of them.
- Pick rays are not tested against entities. The cameras return the `Ray` and store it in `CameraInfo.ray`.

## Running the tests

```
pip install .[test]
pytest
```