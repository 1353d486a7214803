"""libforge: build, install and publish the libraries of a monorepo."""

__version__ = "0.3.0"
