import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

GENERATOR_DIR = Path(__file__).resolve().parent.parent
if str(GENERATOR_DIR) not in sys.path:
    sys.path.insert(0, str(GENERATOR_DIR))

import dtsgen  # noqa: E402


class RecordingGenerator(dtsgen.TypeDefinitionsGenerator):
    """Records every generate() call; optionally fails on one assembly."""

    def __init__(self, fail_on: str | None = None, error: Exception | None = None):
        self.calls: list[dict[str, object]] = []
        self.fail_on = fail_on
        self.error = error

    def generate(
        self,
        assembly_path: str,
        reference_paths: Sequence[str],
        reference_directories: Sequence[Path],
        typedefs_path: str,
        module_format: dtsgen.ModuleFormat,
        is_system_assembly: bool,
        suppress_warnings: bool,
    ) -> None:
        self.calls.append(
            {
                "assembly_path": assembly_path,
                "reference_paths": tuple(reference_paths),
                "reference_directories": tuple(reference_directories),
                "typedefs_path": typedefs_path,
                "module_format": module_format,
                "is_system_assembly": is_system_assembly,
                "suppress_warnings": suppress_warnings,
            }
        )
        if self.fail_on is not None and assembly_path == self.fail_on:
            raise self.error or RuntimeError(f"cannot load {assembly_path}")


@pytest.fixture
def recording_generator() -> RecordingGenerator:
    return RecordingGenerator()


@pytest.fixture
def make_generator() -> Callable[..., RecordingGenerator]:
    return RecordingGenerator


@pytest.fixture
def dotnet_root(tmp_path: Path) -> Path:
    root = tmp_path / "dotnet"
    root.mkdir()
    return root


@pytest.fixture
def host_runtime(dotnet_root: Path) -> dtsgen.HostRuntime:
    runtime_dir = dotnet_root / "shared" / "Microsoft.NETCore.App" / "8.0.1"
    runtime_dir.mkdir(parents=True)
    return dtsgen.HostRuntime(
        version=dtsgen.RuntimeVersion(8, 0, 1),
        directory=runtime_dir,
    )


@pytest.fixture
def make_pack(dotnet_root: Path) -> Callable[..., Path]:
    """Create packs/<pack>.Ref/<version>/ref/<label> with assembly files."""

    def _make_pack(
        pack: str,
        version: str,
        label: str = "net8.0",
        assemblies: tuple[str, ...] = (),
    ) -> Path:
        ref_dir = dotnet_root / "packs" / f"{pack}.Ref" / version / "ref" / label
        ref_dir.mkdir(parents=True)
        for name in assemblies:
            (ref_dir / f"{name}.dll").write_bytes(b"MZ")
        return ref_dir

    return _make_pack


@pytest.fixture
def legacy_root(tmp_path: Path) -> Path:
    root = tmp_path / "Reference Assemblies" / ".NETFramework"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def make_reference_dir(tmp_path: Path) -> Callable[..., dtsgen.ReferenceDirectory]:
    def _make_reference_dir(
        name: str, assemblies: tuple[str, ...] = ()
    ) -> dtsgen.ReferenceDirectory:
        directory = tmp_path / "refs" / name
        directory.mkdir(parents=True)
        for assembly in assemblies:
            (directory / f"{assembly}.dll").write_bytes(b"MZ")
        return dtsgen.ReferenceDirectory(
            directory, dtsgen.DirectoryOrigin.PLATFORM_BUNDLE
        )

    return _make_reference_dir
