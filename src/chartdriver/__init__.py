"""chartdriver: install Helm chart releases onto a cluster from a declarative config."""

__version__ = "0.1.0"
