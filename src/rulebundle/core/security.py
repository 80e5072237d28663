"""
Process-wide XML-parser hardening.

Rule compilers parse the module descriptor and, depending on the engine,
other XML resources in the staged filesystem. Before the first build
session is opened, the parse entry points of the standard-library XML
modules are replaced with their ``defusedxml`` equivalents, which reject
external entities, entity expansion bombs and DTD retrieval.

The step is idempotent and thread-safe: the first caller does the work
under a lock, later callers return immediately. It has no ordering
dependency beyond "before first use of the rule compiler".
"""

from __future__ import annotations

import importlib
import threading

import defusedxml.xmlrpc

from rulebundle.core.logging import get_logger

logger = get_logger(__name__)

# stdlib module -> (defusedxml module, names replaced with the defused versions)
_DEFUSED = {
    "xml.etree.ElementTree": (
        "defusedxml.ElementTree",
        ("XML", "XMLParser", "fromstring", "iterparse", "parse"),
    ),
    "xml.dom.minidom": ("defusedxml.minidom", ("parse", "parseString")),
    "xml.dom.pulldom": ("defusedxml.pulldom", ("parse", "parseString")),
    "xml.dom.expatbuilder": ("defusedxml.expatbuilder", ("parse", "parseString")),
    "xml.sax": ("defusedxml.sax", ("parse", "parseString", "make_parser")),
    "xml.sax.expatreader": ("defusedxml.expatreader", ("create_parser",)),
}

_lock = threading.Lock()
_hardened = False


def _apply(stdlib_name: str) -> str:
    defused_name, names = _DEFUSED[stdlib_name]
    defused_mod = importlib.import_module(defused_name)
    stdlib_mod = importlib.import_module(stdlib_name)
    for attr in names:
        setattr(stdlib_mod, attr, getattr(defused_mod, attr))
    return stdlib_name


def harden_xml_parsers() -> bool:
    """Defuse the stdlib XML parsers once per process.

    Returns:
        True if this call performed the hardening, False if it had already
        been done.
    """
    global _hardened
    if _hardened:
        return False
    with _lock:
        if _hardened:
            return False
        patched = [_apply(name) for name in _DEFUSED]
        defusedxml.xmlrpc.monkey_patch()
        _hardened = True
    logger.info("security.xml_hardened", modules=patched)
    return True


def is_hardened() -> bool:
    return _hardened


__all__ = ["harden_xml_parsers", "is_hardened"]
