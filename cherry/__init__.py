"""cherry: build, coverage, changelog and release automation for Go projects."""

__version__ = "0.4.0"
