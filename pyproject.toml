[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "caskapi"
version = "0.0.1"
description = "Small WSGI API service for cask warehouse listings with feature-flag gating, CORS and health probes"
requires-python = ">=3.10"
dependencies = []
keywords = ["wsgi", "api", "warehouse", "feature-flags", "cors"]
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
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
caskapi = "caskapi.service:main"

[tool.hatch.build.targets.wheel]
packages = ["caskapi"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
