[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "globesim"
version = "0.1.0"
description = "Simulation core for a globe viewer: Perlin terrain, circular orbits, BVH ray picking, a small ECS, cameras and input bindings."
requires-python = ">=3.10"
keywords = ["perlin", "terrain", "orbit", "bvh", "ecs", "camera", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Scientific/Engineering :: Visualization",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["globesim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
