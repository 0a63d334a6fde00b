"""Java declaration parser built on Tree-sitter.

Extracts methods (and constructors), fields and type declarations from a
compilation unit and renders each one canonically: comments are dropped and
layout is collapsed so that re-indenting a member does not count as a change.
"""

import logging
from typing import Iterator

import tree_sitter_java
from tree_sitter import Language, Node, Parser

from impactscope.analysis.models import DeclaredMember, MemberKind
from impactscope.core.exceptions import UnparsableSource
from impactscope.parsing.base import DeclarationParser

logger = logging.getLogger(__name__)

JAVA_LANGUAGE = Language(tree_sitter_java.language())

TYPE_NODES = {
    "class_declaration",
    "interface_declaration",
    "enum_declaration",
    "record_declaration",
    "annotation_type_declaration",
}
METHOD_NODES = {"method_declaration", "constructor_declaration", "compact_constructor_declaration"}
FIELD_NODES = {"field_declaration", "constant_declaration"}
BODY_NODES = {
    "class_body",
    "interface_body",
    "enum_body",
    "annotation_type_body",
    "block",
    "constructor_body",
}
ANNOTATION_NODES = {"annotation", "marker_annotation"}
# Rendered verbatim: whitespace inside these is significant
ATOMIC_NODES = {"string_literal", "character_literal", "text_block"}

_OPERATOR_CHARS = set("+-*/%=<>!&|^~?:")


def _is_comment(node: Node) -> bool:
    return node.type.endswith("comment")


def _text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace") if node.text is not None else ""


def _is_word(ch: str) -> bool:
    return ch.isalnum() or ch in "_$\"'"


def _needs_space(left: str, right: str) -> bool:
    a, b = left[-1], right[0]
    if _is_word(a) and _is_word(b):
        return True
    if a in _OPERATOR_CHARS and b in _OPERATOR_CHARS:
        return True
    return a in ",)]>" and _is_word(b)


def _tokens(node: Node, skip: set[str] | None = None) -> Iterator[str]:
    """Yield leaf token texts below *node* in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if _is_comment(current) or (skip and current.type in skip):
            continue
        if current.child_count == 0 or current.type in ATOMIC_NODES:
            token = _text(current)
            if token:
                yield token
            continue
        stack.extend(reversed(current.children))


def join_tokens(tokens: Iterator[str] | list[str]) -> str:
    """Join tokens with the minimal spacing needed to keep them apart."""
    parts: list[str] = []
    previous = ""
    for token in tokens:
        if previous and _needs_space(previous, token):
            parts.append(" ")
        parts.append(token)
        previous = token
    return "".join(parts)


def render(node: Node, skip: set[str] | None = None) -> str:
    """Canonical rendering of a syntax node."""
    return join_tokens(_tokens(node, skip))


class JavaDeclarationParser(DeclarationParser):
    """Parser for Java compilation units."""

    def __init__(self) -> None:
        self._parser = Parser(JAVA_LANGUAGE)

    @property
    def supported_extensions(self) -> list[str]:
        return [".java"]

    @property
    def language(self) -> str:
        return "java"

    def extract_members(self, content: str, file_id: str | None = None) -> list[DeclaredMember]:
        """Parse Java source and extract its member declarations."""
        try:
            data = content.encode("utf-8")
        except UnicodeEncodeError as e:
            raise UnparsableSource(file_id, "text is not valid UTF-8") from e

        tree = self._parser.parse(data)
        root = tree.root_node
        if root.has_error:
            line = self._first_error_line(root)
            raise UnparsableSource(file_id, f"syntax error near line {line}")

        members: list[DeclaredMember] = []
        for node in self._walk(root):
            if node.type in METHOD_NODES:
                member = self._method(node)
                if member:
                    members.append(member)
            elif node.type in FIELD_NODES:
                members.extend(self._fields(node))
            elif node.type in TYPE_NODES:
                member = self._type(node)
                if member:
                    members.append(member)
        return members

    @staticmethod
    def _walk(root: Node) -> Iterator[Node]:
        """Pre-order traversal in source order."""
        stack = [root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @classmethod
    def _first_error_line(cls, root: Node) -> int:
        for node in cls._walk(root):
            if node.type == "ERROR" or node.is_missing:
                return node.start_point[0] + 1
        return root.start_point[0] + 1

    # ------------------------------------------------------------------
    # Member extraction
    # ------------------------------------------------------------------

    def _method(self, node: Node) -> DeclaredMember | None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        header = [c for c in node.children if c.type not in BODY_NODES and c.type != ";"]
        signature = join_tokens(
            token for child in header for token in _tokens(child, skip=ANNOTATION_NODES)
        )
        return DeclaredMember(
            kind=MemberKind.METHOD,
            name=_text(name_node),
            signature=signature,
            rendering=render(node),
            source=_text(node),
        )

    def _fields(self, node: Node) -> list[DeclaredMember]:
        modifiers = [c for c in node.children if c.type == "modifiers"]
        type_node = node.child_by_field_name("type")
        declarators = [c for c in node.children if c.type == "variable_declarator"]
        if type_node is None or not declarators:
            return []

        prefix = [render(m) for m in modifiers] + [render(type_node)]
        sig_prefix = [render(m, skip=ANNOTATION_NODES) for m in modifiers] + [render(type_node)]
        source = _text(node)

        members = []
        for declarator in declarators:
            name_node = declarator.child_by_field_name("name")
            if name_node is None:
                continue
            name = _text(name_node)
            dims = declarator.child_by_field_name("dimensions")
            sig_name = name + (render(dims) if dims is not None else "")
            members.append(
                DeclaredMember(
                    kind=MemberKind.FIELD,
                    name=name,
                    signature=join_tokens([p for p in sig_prefix if p] + [sig_name]),
                    rendering=join_tokens([p for p in prefix if p] + [render(declarator)]),
                    source=source,
                )
            )
        return members

    def _type(self, node: Node) -> DeclaredMember | None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        header_nodes = [c for c in node.children if c.type not in BODY_NODES]
        header = join_tokens(token for child in header_nodes for token in _tokens(child))
        signature = join_tokens(
            token for child in header_nodes for token in _tokens(child, skip=ANNOTATION_NODES)
        )

        rendering = header
        if node.type == "enum_declaration":
            body = node.child_by_field_name("body")
            constants = []
            if body is not None:
                for child in body.children:
                    if child.type == "enum_constant":
                        constants.append(render(child, skip={"class_body"}))
            rendering = f"{header} {{ {', '.join(constants)} }}"

        return DeclaredMember(
            kind=MemberKind.TYPE,
            name=_text(name_node),
            signature=signature,
            rendering=rendering,
            source=_text(node),
        )
