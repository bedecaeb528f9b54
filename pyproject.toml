[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rpcwire"
version = "0.1.0"
description = "gRPC wire-format building blocks: framing, status codes, metadata, marshalling and service stub generation"
requires-python = ">=3.10"
dependencies = [
    "protobuf",
]
keywords = [
    "grpc",
    "protobuf",
    "rpc",
    "framing",
    "metadata",
    "code-generation",
    "protoc-plugin",
]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: Software Development :: Code Generators",
    "Topic :: Internet",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
protoc-gen-rpcwire = "rpcwire.codegen:main"

[tool.hatch.build.targets.wheel]
packages = ["rpcwire"]

[tool.hatch.build.targets.sdist]
include = [
    "rpcwire",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
