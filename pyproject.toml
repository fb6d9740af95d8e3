[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kubeharness"
version = "0.1.0"
description = "Validation, manifest building and resource operations for Kubernetes test harnesses"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "testing", "pods", "replicasets", "services", "rbac", "manifests"]
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
    "Topic :: System :: Clustering",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kubeharness"]

[tool.pytest.ini_options]
addopts = "-ra"
