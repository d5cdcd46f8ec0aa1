"""Foo Operator: keeps a Deployment in line with each Foo resource."""

__version__ = "0.1.0"
