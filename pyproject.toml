[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "parceltrack"
version = "1.0.0"
description = "Delivery tracking services: an order producer, an order consumer with status pages, and a key-value order store behind an HTTP API."
requires-python = ">=3.10"
keywords = ["delivery", "tracking", "orders", "flask", "zeromq", "microservices"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Office/Business",
]
dependencies = [
    "flask",
    "pyzmq",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
parceltrack-db = "parceltrack.dbservice:main"
parceltrack-producer = "parceltrack.producer_service:main"
parceltrack-consumer = "parceltrack.consumer_service:main"

[tool.hatch.build.targets.wheel]
packages = ["parceltrack"]

[tool.pytest.ini_options]
addopts = "-ra"
