[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dvmkit"
version = "0.1.0"
description = "A networked beverage vending machine: local sales, card payment and pre-payment through nearby machines"
requires-python = ">=3.10"
dependencies = []
keywords = ["vending", "beverage", "point-of-sale", "pre-payment", "kiosk"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Point-Of-Sale",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
dvmkit = "dvmkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["dvmkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
