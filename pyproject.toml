[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "sectorcaster"
version = "0.1.0"
description = "A sector-and-portal software renderer with a small first person shooter on top"
requires-python = ">=3.10"
keywords = ["game", "renderer", "portal", "sector", "software-rendering", "fps", "lightmap"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "pygame",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sectorcaster = "sectorcaster.game:main"

[tool.setuptools.packages.find]
include = ["sectorcaster*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
