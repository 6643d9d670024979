"""
Build pipeline components for vlcbuild.

This module provides the libVLC build-time pipeline:
- Library location (overrides, pkg-config, platform defaults)
- Declaration generation (pycparser) or pre-generated copy
- Windows import library synthesis (dumpbin/lib)
- Runtime asset staging
- Linker directive emission
"""

from .asset_stager import AssetStager, StagingError, StagingResult
from .bindings import BindingsCopier, BindingsError, BindingsGenerator
from .import_library import ImportLibraryError, ImportLibrarySynthesizer, parse_exports
from .link_emitter import LinkDirectives, LinkEmitter
from .location import (
    LinuxStrategy,
    LocationEngine,
    MacOSStrategy,
    PlatformStrategy,
    WindowsStrategy,
)
from .orchestrator import BuildOrchestrator, BuildOrchestratorError, BuildResult
from .resolved_config import ResolvedConfig, merge_contributions

__all__ = [
    'AssetStager',
    'StagingError',
    'StagingResult',
    'BindingsCopier',
    'BindingsError',
    'BindingsGenerator',
    'ImportLibraryError',
    'ImportLibrarySynthesizer',
    'parse_exports',
    'LinkDirectives',
    'LinkEmitter',
    'LocationEngine',
    'PlatformStrategy',
    'WindowsStrategy',
    'MacOSStrategy',
    'LinuxStrategy',
    'BuildOrchestrator',
    'BuildOrchestratorError',
    'BuildResult',
    'ResolvedConfig',
    'merge_contributions',
]
