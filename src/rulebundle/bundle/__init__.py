"""
Rule bundle build and load.

Build::

    sources.discover_sources      rules folder   -> SourceManifest
    staging.stage_sources         SourceManifest -> StagedFilesystem
    compiler.compile_staged       StagedFilesystem -> CompiledModule
    extractor.write_archive       CompiledModule -> archive on disk

``pipeline.BundleCompiler`` chains the four; ``loader.BundleLoader`` reads
an archive back and opens sessions on it.
"""

from rulebundle.bundle.compiler import CompiledModule, Diagnostic, Severity, compile_staged
from rulebundle.bundle.descriptor import (
    DEFAULT_KBASE,
    DEFAULT_KSESSION,
    module_descriptor,
    parse_descriptor,
)
from rulebundle.bundle.extractor import write_archive
from rulebundle.bundle.loader import BundleLoader, LoadStage
from rulebundle.bundle.pipeline import BuildReport, BuildStage, BundleCompiler, compile_bundle
from rulebundle.bundle.sources import (
    RuleKind,
    RuleSourceFile,
    SourceManifest,
    collect_rule_files,
    discover_sources,
)
from rulebundle.bundle.staging import (
    DESCRIPTOR_PATH,
    RULES_STAGING_ROOT,
    StagedFilesystem,
    stage_sources,
)

__all__ = [
    "CompiledModule",
    "Diagnostic",
    "Severity",
    "compile_staged",
    "DEFAULT_KBASE",
    "DEFAULT_KSESSION",
    "module_descriptor",
    "parse_descriptor",
    "write_archive",
    "BundleLoader",
    "LoadStage",
    "BuildReport",
    "BuildStage",
    "BundleCompiler",
    "compile_bundle",
    "RuleKind",
    "RuleSourceFile",
    "SourceManifest",
    "collect_rule_files",
    "discover_sources",
    "DESCRIPTOR_PATH",
    "RULES_STAGING_ROOT",
    "StagedFilesystem",
    "stage_sources",
]
