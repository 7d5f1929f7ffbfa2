"""Extensible dependency parsing via registry pattern.

Supporting a new manifest type requires only a parser class with a
``file_pattern`` and a ``parse`` method, appended to PARSERS.
"""

from __future__ import annotations

import json
import re
import tomllib
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from repolens.ingest.models import Entry, iter_entries

_REQUIREMENT_SPLIT = re.compile(r"[>=<!~\[;\s]")


def _requirement_name(spec: str) -> str:
    return _REQUIREMENT_SPLIT.split(spec.strip(), maxsplit=1)[0].strip()


@runtime_checkable
class DependencyParser(Protocol):
    """Protocol for manifest file parsers."""

    file_pattern: str

    def parse(self, content: str) -> list[str]:
        """Extract dependency names from file content."""
        ...


class RequirementsTxtParser:
    """Parses requirements.txt files."""

    file_pattern = "requirements.txt"

    def parse(self, content: str) -> list[str]:
        names: list[str] = []
        for line in content.splitlines():
            line = line.strip()
            if not line or line.startswith("#") or line.startswith("-"):
                continue
            name = _requirement_name(line)
            if name:
                names.append(name)
        return names


class PyprojectTomlParser:
    """Parses PEP 621 ``[project].dependencies``."""

    file_pattern = "pyproject.toml"

    def parse(self, content: str) -> list[str]:
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError:
            return []
        deps = data.get("project", {}).get("dependencies", [])
        return [n for n in (_requirement_name(d) for d in deps if isinstance(d, str)) if n]


class PackageJsonParser:
    """Parses package.json dependency objects."""

    file_pattern = "package.json"

    def parse(self, content: str) -> list[str]:
        try:
            data = json.loads(content)
            return list(data.get("dependencies", {}).keys())
        except (json.JSONDecodeError, TypeError, AttributeError):
            return []


class PomXmlParser:
    """Parses Maven ``<dependency>`` artifact ids."""

    file_pattern = "pom.xml"

    def parse(self, content: str) -> list[str]:
        try:
            root = ET.fromstring(content)
        except ET.ParseError:
            return []
        names: list[str] = []
        for elem in root.iter():
            if _local_name(elem.tag) != "dependency":
                continue
            for child in elem:
                if _local_name(child.tag) == "artifactId" and child.text:
                    names.append(child.text.strip())
        return names


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


# Registry: add new parsers here. Order determines precedence when
# the same dependency appears in multiple manifests.
PARSERS: list[DependencyParser] = [
    PackageJsonParser(),
    PyprojectTomlParser(),
    RequirementsTxtParser(),
    PomXmlParser(),
]


def collect_dependencies(
    entries: Sequence[Entry], parsers: Sequence[DependencyParser] = PARSERS
) -> list[str]:
    """Dependency names from every manifest in the forest, deduplicated."""
    seen: set[str] = set()
    unique: list[str] = []
    for parser in parsers:
        for entry in iter_entries(entries):
            if entry.name != parser.file_pattern or not entry.content:
                continue
            for dep in parser.parse(entry.content):
                low = dep.lower()
                if low not in seen:
                    seen.add(low)
                    unique.append(dep)
    return unique
