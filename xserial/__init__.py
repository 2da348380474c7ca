"""Visitor-based serialization of annotated objects, collections, scalars and JSON."""

__version__ = "0.1.0"
__all__ = [
    "context",
    "errors",
    "typeutil",
    "interfaces",
    "values",
    "meta",
    "jsondoc",
    "sample",
]