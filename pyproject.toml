[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "modesp"
version = "0.1.0"
description = "Module contract, hardware abstraction layer and relay/PWM actuator drivers for refrigeration controllers"
requires-python = ">=3.10"
dependencies = []
keywords = ["hal", "refrigeration", "relay", "pwm", "actuator", "controller", "embedded"]
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
    "Topic :: Home Automation",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["modesp"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
