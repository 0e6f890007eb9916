[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clinicdesk"
version = "0.1.0"
description = "Clinic back-office desk: an SQLite resource library and treatment records, SMTP mail with attachments, a serial title lookup and media player helpers."
requires-python = ">=3.10"
keywords = ["clinic", "crud", "sqlite", "smtp", "serial", "arduino", "resource-library"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Healthcare Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
]
dependencies = [
    "pyserial",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
clinicdesk = "clinicdesk.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["clinicdesk"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
