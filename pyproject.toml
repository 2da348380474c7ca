[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xserial"
version = "0.1.0"
description = "Visitor-based serialization of annotated objects, sequences, dicts and JSON documents"
requires-python = ">=3.10"
dependencies = []
keywords = ["serialization", "deserialization", "visitor", "json", "reflection"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xserial-sample = "xserial.sample:main"

[tool.hatch.build.targets.wheel]
packages = ["xserial"]

[tool.pytest.ini_options]
addopts = "-ra"
