"""Parsing module - declaration extraction for source files."""

from impactscope.parsing.base import DeclarationParser
from impactscope.parsing.java_parser import JavaDeclarationParser

__all__ = [
    "DeclarationParser",
    "JavaDeclarationParser",
]
