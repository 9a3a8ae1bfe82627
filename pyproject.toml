[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "placelog"
version = "0.1.0"
description = "Log moves between home, office and outside over HTTP and get time summaries with commute detection."
requires-python = ">=3.10"
keywords = ["time-tracking", "location", "commute", "flask", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Environment :: Console",
    "Framework :: Flask",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Topic :: Office/Business :: Scheduling",
]
dependencies = [
    "flask",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
placelog = "placelog.web:main"
placelog-seed = "placelog.seeder:main"
placelog-users = "placelog.user_manager:main"

[tool.hatch.build.targets.wheel]
packages = ["placelog"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
