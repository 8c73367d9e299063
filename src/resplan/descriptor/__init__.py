"""Declarative resource descriptor models."""

from resplan.descriptor.base import ResourceDescriptor
from resplan.descriptor.fields import (
    BooleanVirtualField,
    FieldDescriptor,
    IamPolicy,
    IntegerVirtualField,
    NestedQuery,
    StringVirtualField,
    Timeouts,
    VirtualField,
)

__all__ = [
    "BooleanVirtualField",
    "FieldDescriptor",
    "IamPolicy",
    "IntegerVirtualField",
    "NestedQuery",
    "ResourceDescriptor",
    "StringVirtualField",
    "Timeouts",
    "VirtualField",
]
