"""
Module descriptor — the fixed ``kmodule.xml`` written into every bundle.

The descriptor declares one knowledge base, ``defaultKBase``, holding one
stateless session, ``defaultKSession``. It is the same for every bundle
this package builds, and its bytes must not change: archives built by
earlier releases are loaded by name against exactly this document.

Examples:
    >>> module_descriptor() == KMODULE_XML
    True
    >>> parsed = parse_descriptor(module_descriptor())
    >>> parsed.session_names()
    ['defaultKSession']
    >>> parsed.kbases["defaultKBase"][0].type
    'stateless'
"""

from __future__ import annotations

from dataclasses import dataclass, field

from defusedxml import ElementTree

DEFAULT_KBASE = "defaultKBase"
DEFAULT_KSESSION = "defaultKSession"

KMODULE_NAMESPACE = "http://www.drools.org/xsd/kmodule"

KMODULE_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<kmodule xmlns="http://www.drools.org/xsd/kmodule">\n'
    '  <kbase name="defaultKBase">\n'
    '    <ksession name="defaultKSession" type="stateless"/>\n'
    "  </kbase>\n"
    "</kmodule>\n"
)


@dataclass(frozen=True)
class SessionDeclaration:
    name: str
    type: str


@dataclass(frozen=True)
class ModuleDescriptor:
    """Parsed view of a descriptor: kbase name → its session declarations."""

    kbases: dict[str, tuple[SessionDeclaration, ...]] = field(default_factory=dict)

    def session_names(self) -> list[str]:
        return [s.name for sessions in self.kbases.values() for s in sessions]

    def find_session(self, name: str) -> SessionDeclaration | None:
        for sessions in self.kbases.values():
            for session in sessions:
                if session.name == name:
                    return session
        return None


def module_descriptor() -> str:
    """Return the constant module descriptor document."""
    return KMODULE_XML


def parse_descriptor(text: str | bytes) -> ModuleDescriptor:
    """Parse a descriptor with a hardened XML parser.

    Session ``type`` defaults to ``stateful`` when the attribute is absent.

    Raises:
        xml.etree.ElementTree.ParseError: If ``text`` is not well-formed.
        defusedxml.DefusedXmlException: If ``text`` uses forbidden constructs
            such as entity declarations.
    """
    root = ElementTree.fromstring(text)
    ns = f"{{{KMODULE_NAMESPACE}}}"
    kbases: dict[str, tuple[SessionDeclaration, ...]] = {}
    for kbase in root.iter(f"{ns}kbase"):
        sessions = tuple(
            SessionDeclaration(
                name=ksession.get("name", ""),
                type=ksession.get("type", "stateful"),
            )
            for ksession in kbase.iter(f"{ns}ksession")
        )
        kbases[kbase.get("name", "")] = sessions
    return ModuleDescriptor(kbases=kbases)


__all__ = [
    "DEFAULT_KBASE",
    "DEFAULT_KSESSION",
    "KMODULE_NAMESPACE",
    "KMODULE_XML",
    "ModuleDescriptor",
    "SessionDeclaration",
    "module_descriptor",
    "parse_descriptor",
]
