"""
Build orchestration for libVLC consumers.

This module runs the whole pipeline for one build invocation:
- Environment resolution (target OS/arch, override variables)
- Library location (overrides, pkg-config, platform defaults)
- Declaration module generation or copy
- Windows import library synthesis when no import library exists
- Optional runtime asset staging
- Linker directive emission

Every step blocks until it finishes. Directives are only emitted after all
earlier steps succeeded.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from ..config import BuildConfig, BuildConfigError
from ..packages.pkg_config import PackageRegistry
from ..packages.platform_utils import PlatformContext, PlatformDetector, PlatformError
from ..packages.toolchain import MsvcToolchain, MsvcTools, ToolchainError
from .asset_stager import AssetStager, StagingError, StagingResult
from .bindings import BindingsCopier, BindingsError, BindingsGenerator
from .import_library import ImportLibraryError, ImportLibrarySynthesizer, machine_type
from .link_emitter import LinkDirectives, LinkEmitter, build_directives
from .location import LocationEngine, PlatformStrategy, strategy_for
from .resolved_config import ResolvedConfig

# (link unit, symbol prefix kept in the synthesized import library)
SYNTHESIS_TARGETS: Tuple[Tuple[str, str], ...] = (
    ("libvlc", "libvlc_"),
    ("libvlccore", "vlc_"),
)


@dataclass
class BuildResult:
    """Result of a complete pipeline run."""

    success: bool
    message: str
    resolved: Optional[ResolvedConfig] = None
    declarations: Optional[Path] = None
    directives: Optional[LinkDirectives] = None
    link_json: Optional[Path] = None
    import_libraries: List[Path] = field(default_factory=list)
    staging: Optional[StagingResult] = None
    build_time: float = 0.0
    error_type: Optional[str] = None


class BuildOrchestratorError(Exception):
    """Exception raised for build orchestration errors."""
    pass


class BuildOrchestrator:
    """
    Orchestrates the libVLC build-time pipeline.

    Example usage:
        orchestrator = BuildOrchestrator(verbose=True)
        result = orchestrator.build(project_dir=Path("."))
        if result.success:
            print(result.directives.lines())
    """

    def __init__(
        self,
        ctx: Optional[PlatformContext] = None,
        registry: Optional[PackageRegistry] = None,
        toolchain: Optional[MsvcToolchain] = None,
        synthesizer_runner=None,
        bindings_generator: Optional[BindingsGenerator] = None,
        stream: Optional[TextIO] = None,
        verbose: bool = False,
    ):
        """
        Initialize build orchestrator.

        Args:
            ctx: Platform context (default: detected from os.environ)
            registry: Package registry (default: pkg-config on PATH)
            toolchain: MSVC toolchain finder (default: created from ctx)
            synthesizer_runner: Tool runner passed to ImportLibrarySynthesizer
            bindings_generator: Generator used in generate mode
            stream: Link configuration channel (default: stdout)
            verbose: Enable verbose output
        """
        self.ctx = ctx
        self.registry = registry
        self.toolchain = toolchain
        self.synthesizer_runner = synthesizer_runner
        self.bindings_generator = bindings_generator
        self.stream = stream
        self.verbose = verbose

    def _context(self) -> PlatformContext:
        if self.ctx is None:
            self.ctx = PlatformDetector.from_environment()
        return self.ctx

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message)

    def locate(self, use_pkg_config: bool = True) -> ResolvedConfig:
        """
        Resolve the library location without producing any output.

        Raises:
            PlatformError: If the target platform is unsupported
        """
        ctx = self._context()
        engine = LocationEngine(ctx, registry=self.registry, use_registry=use_pkg_config)
        return engine.resolve()

    def build(self, project_dir: Path, config: Optional[BuildConfig] = None) -> BuildResult:
        """
        Execute the complete pipeline.

        Args:
            project_dir: Project root directory
            config: Build configuration (default: loaded from vlcbuild.ini)

        Returns:
            BuildResult; success is False with a cause message on any fatal error
        """
        start_time = time.time()
        try:
            result = self._build(project_dir, config or BuildConfig.load(project_dir))
        except (
            BuildConfigError,
            PlatformError,
            BindingsError,
            ToolchainError,
            ImportLibraryError,
            StagingError,
            BuildOrchestratorError,
        ) as e:
            return BuildResult(
                success=False,
                message=f"{type(e).__name__}: {e}",
                error_type=type(e).__name__,
                build_time=time.time() - start_time,
            )
        result.build_time = time.time() - start_time
        return result

    def _build(self, project_dir: Path, config: BuildConfig) -> BuildResult:
        ctx = self._context()
        strategy = strategy_for(ctx)
        out_dir = config.resolve_out_dir(project_dir)
        self._log(f"Target: {ctx.target_os}/{ctx.target_arch}")
        self._log(f"Output: {out_dir}")

        if strategy.NEEDS_IMPORT_LIBRARY:
            # Fail before any work if the import library can't be produced
            machine_type(ctx.target_arch)

        # Phase 1: locate
        resolved = self.locate(use_pkg_config=config.use_pkg_config)
        self._log("Resolved libVLC configuration:")
        self._log(resolved.describe())

        # Phase 2: declarations
        if config.generate_bindings:
            generator = self.bindings_generator or BindingsGenerator(
                out_dir,
                cpp_path=ctx.get("CPP") or "cpp",
                show_progress=self.verbose,
            )
            declarations = generator.generate(
                resolved.all_include_paths(),
                system_headers=resolved.registry_hit,
            )
        else:
            declarations = BindingsCopier(out_dir).copy()
        self._log(f"Declarations: {declarations}")

        # Phase 3: import libraries
        import_libraries: List[Path] = []
        if strategy.NEEDS_IMPORT_LIBRARY and not resolved.registry_hit:
            import_libraries = self._synthesize_import_libraries(ctx, resolved, out_dir)
            if import_libraries:
                resolved = resolved.with_link_path(out_dir)

        # Phase 4: runtime assets
        staging = None
        if config.bundle_runtime:
            staging = AssetStager(out_dir, show_progress=self.verbose).stage(resolved)

        # Phase 5: linker directives
        directives = self._directives(resolved, strategy)
        link_json = LinkEmitter(out_dir, stream=self.stream).emit(directives)

        return BuildResult(
            success=True,
            message="Build configured",
            resolved=resolved,
            declarations=declarations,
            directives=directives,
            link_json=link_json,
            import_libraries=import_libraries,
            staging=staging,
        )

    def _synthesize_import_libraries(
        self,
        ctx: PlatformContext,
        resolved: ResolvedConfig,
        out_dir: Path,
    ) -> List[Path]:
        """Create missing import libraries from the installed DLLs."""
        lib_dir = resolved.lib_dir
        missing = [
            (name, prefix)
            for name, prefix in SYNTHESIS_TARGETS
            if lib_dir is None or not (lib_dir / f"{name}.lib").exists()
        ]
        if not missing:
            return []

        dlls = []
        for name, prefix in missing:
            dll_dir = resolved.library_dir_for(f"{name}.dll")
            if dll_dir is None:
                raise BuildOrchestratorError(
                    "libvlc.dll location unknown: set VLC_LIB_DIR or VLC_INSTALL_DIR"
                )
            dlls.append((dll_dir / f"{name}.dll", name, prefix))

        tools: MsvcTools = (self.toolchain or MsvcToolchain(ctx)).locate()
        synthesizer = ImportLibrarySynthesizer(
            tools,
            ctx.target_arch,
            out_dir,
            runner=self.synthesizer_runner,
            show_progress=self.verbose,
        )
        return [synthesizer.synthesize(dll, name, prefix) for dll, name, prefix in dlls]

    @staticmethod
    def _directives(resolved: ResolvedConfig, strategy: PlatformStrategy) -> LinkDirectives:
        return build_directives(
            search_paths=resolved.link_paths,
            libraries=strategy.LINK_LIBRARIES + strategy.SYSTEM_LIBRARIES,
            include_dirs=resolved.all_include_paths(),
        )
