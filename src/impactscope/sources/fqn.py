"""Fully qualified class names for Java sources."""

import logging
import re
from pathlib import PurePosixPath

from impactscope.core.constants import JAVA_EXTENSION, JAVA_SOURCE_ROOTS

logger = logging.getLogger(__name__)

_PACKAGE_RE = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)
_TYPE_RE = re.compile(r"\b(?:class|interface|enum|record)\s+([A-Za-z_$][\w$]*)")


def extract_package(source: str) -> str:
    """Return the package name declared in *source*, or an empty string."""
    match = _PACKAGE_RE.search(source)
    return match.group(1) if match else ""


def extract_fqcn(source: str, file_name: str | None = None) -> str | None:
    """
    Derive the fully qualified class name of a Java file.

    The class name is the file stem when a file name is given (Java requires
    the public type to match it), otherwise the first declared type.
    """
    package = extract_package(source)

    class_name = None
    if file_name:
        class_name = PurePosixPath(file_name).stem
    else:
        for line in source.splitlines():
            stripped = line.strip()
            if stripped.startswith(("//", "/*", "*", "import ", "package ")):
                continue
            match = _TYPE_RE.search(stripped)
            if match:
                class_name = match.group(1)
                break

    if not class_name:
        logger.warning("Could not extract FQCN from code snippet.")
        return None
    return f"{package}.{class_name}" if package else class_name


def fqcn_from_path(rel_path: str) -> str:
    """Map a repository-relative path such as src/main/java/a/B.java to a.B."""
    path = rel_path.replace("\\", "/")
    for root in JAVA_SOURCE_ROOTS:
        prefix = root.rstrip("/") + "/"
        if path.startswith(prefix):
            path = path[len(prefix):]
            break
    if path.endswith(JAVA_EXTENSION):
        path = path[: -len(JAVA_EXTENSION)]
    return path.replace("/", ".")


def fqcn_to_path(fqcn: str) -> str:
    """Map a.B to a/B.java."""
    return fqcn.replace(".", "/") + JAVA_EXTENSION


def matches_target(fqcn: str, target_file_name: str) -> bool:
    """
    Check whether *fqcn* names the file the user called *target_file_name*.

    Accepts the FQCN itself, a simple or dotted suffix (``B`` or ``a.B``, with
    or without ``.java``) and a path suffix (``a/B.java``).
    """
    target = target_file_name.strip().replace("\\", "/")
    if not target:
        return False
    if fqcn == target:
        return True
    dotted = fqcn_from_path(target.lstrip("/"))
    return fqcn == dotted or fqcn.endswith("." + dotted)
