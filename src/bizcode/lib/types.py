"""Stable domain identifier newtypes."""

from typing import NewType

BusinessCode = NewType("BusinessCode", str)
QualifiedName = NewType("QualifiedName", str)
