[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "beefykit"
version = "0.1.0"
description = "BEEFY utilities: Ethereum-compatible binary Merkle trees, authority key handling, MMR leaf helpers and voting-round bookkeeping."
requires-python = ">=3.10"
keywords = [
    "beefy",
    "merkle",
    "merkle-proof",
    "keccak",
    "secp256k1",
    "mmr",
    "bridge",
    "consensus",
]
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
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "pycryptodome",
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
beefykit = "beefykit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["beefykit"]

[tool.hatch.build.targets.sdist]
include = [
    "beefykit",
    "tests",
    "pyproject.toml",
    "README.md",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
