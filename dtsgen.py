"""TypeScript type-definitions generator front-end for .NET assemblies.

Parses the command line into a frozen GenerationConfig, resolves system
reference assemblies from the installed .NET targeting packs (or the .NET
Framework reference assemblies), and drives a pluggable type definitions
generator once per input assembly.

Usage:
    dtsgen -a MyLib.dll -t MyLib.d.ts -m esm
    python dtsgen.py -a System.Runtime -f net8.0 -t System.Runtime.d.ts
"""

import argparse
import re
import subprocess
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from importlib.metadata import entry_points
from pathlib import Path
from typing import NamedTuple, NoReturn

PATH_SEPARATOR = ";"
ASSEMBLY_EXTENSIONS = (".dll", ".exe")
SYSTEM_ASSEMBLY_EXTENSION = ".dll"
TYPEDEFS_EXTENSION = ".d.ts"
LOADER_EXTENSION = ".js"

DEFAULT_TARGET_PACK = "Microsoft.NETCore.App"
LEGACY_FRAMEWORK_TARGET = "net472"
LEGACY_LABEL_PREFIX = "net4"
LEGACY_REFERENCE_ROOT = Path(
    "C:/Program Files (x86)/Reference Assemblies/Microsoft/Framework/.NETFramework"
)
RUNTIME_LIST_NAME = "Microsoft.NETCore.App"
GENERATOR_ENTRY_POINT_GROUP = "dtsgen.generators"


# ===--- CLI config contracts ---=== #


class ModuleFormat(Enum):
    NONE = "none"
    COMMONJS = "commonjs"
    ES = "es"


class Provenance(Enum):
    USER_SUPPLIED = "user-supplied"
    SYSTEM_RESOLVED = "system-resolved"


class DirectoryOrigin(Enum):
    LEGACY_RUNTIME_BASELINE = "legacy-runtime-baseline"
    PLATFORM_BUNDLE = "platform-bundle"


MODULE_FORMAT_ALIASES: dict[str, ModuleFormat] = {
    "commonjs": ModuleFormat.COMMONJS,
    "cjs": ModuleFormat.COMMONJS,
    "es": ModuleFormat.ES,
    "esm": ModuleFormat.ES,
    "mjs": ModuleFormat.ES,
}


@dataclass(frozen=True)
class InputModule:
    """One input assembly token and where its path came from.

    Attributes:
        path: Literal path from the command line, or the absolute path of
            the file found in a reference directory.
        provenance: USER_SUPPLIED until a bare module name is bound to a
            file by resolve_system_modules, then SYSTEM_RESOLVED.
    """

    path: str
    provenance: Provenance = Provenance.USER_SUPPLIED

    @property
    def is_system_assembly(self) -> bool:
        return self.provenance is Provenance.SYSTEM_RESOLVED


@dataclass(frozen=True)
class ReferenceDirectory:
    path: Path
    origin: DirectoryOrigin


@dataclass(frozen=True)
class GenerationConfig:
    """Complete, validated generation request.

    Produced unresolved by validate_config (reference_directories empty,
    assemblies all USER_SUPPLIED) and replaced by build_config with the
    resolved assemblies, reference directories and platform label.

    The order of reference_directories is search priority: first wins.
    """

    assemblies: tuple[InputModule, ...]
    reference_paths: tuple[str, ...]
    reference_directories: tuple[ReferenceDirectory, ...]
    typedefs_paths: tuple[str, ...]
    module_format: ModuleFormat = ModuleFormat.NONE
    suppress_warnings: bool = False
    target_framework: str | None = None
    target_packs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.assemblies or len(self.assemblies) != len(self.typedefs_paths):
            raise ValueError(
                "GenerationConfig requires one typedefs path per assembly, "
                f"got {len(self.assemblies)} assemblies and "
                f"{len(self.typedefs_paths)} typedefs paths"
            )


VALID_ERROR_CODES = {
    "MISSING_VALUE",
    "UNRECOGNIZED_ARGUMENT",
    "INVALID_MODULE_FORMAT",
    "INVALID_ASSEMBLY_EXTENSION",
    "INVALID_TYPEDEFS_EXTENSION",
    "MISSING_ASSEMBLY",
    "MISSING_TYPEDEFS",
    "TYPEDEFS_COUNT_MISMATCH",
}


class ConfigError(Exception):
    def __init__(self, code: str, message: str, suggestion: str | None = None):
        if code not in VALID_ERROR_CODES:
            raise ValueError(f"Unknown config error code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion


class UsageError(ConfigError):
    """Malformed command line; the caller prints usage text."""


class ValidationError(ConfigError):
    """Well-formed command line describing an invalid generation request."""


class CollaboratorFailure(Exception):
    """Fatal error raised while generating type definitions for one input."""


class _RaisingArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError("UNRECOGNIZED_ARGUMENT", message)


def parse_module_format(raw: str | None) -> ModuleFormat:
    if raw is None:
        return ModuleFormat.NONE
    try:
        return MODULE_FORMAT_ALIASES[raw.lower()]
    except KeyError:
        raise UsageError(
            "INVALID_MODULE_FORMAT",
            f"argument -m/--module/--modules: unsupported module format '{raw}'",
            "Valid values are 'commonjs' or 'esm'.",
        ) from None


def build_argument_parser() -> argparse.ArgumentParser:
    parser = _RaisingArgumentParser(
        prog="dtsgen",
        description="Generate TypeScript type definitions for .NET assemblies.",
        epilog=(
            f"List values may join several entries with '{PATH_SEPARATOR}'; "
            "empty entries are ignored. Values may be attached (--assembly=a.dll, "
            "-aa.dll); a value starting with '-' must be attached (--typedefs=-x.d.ts)."
        ),
        add_help=False,
        allow_abbrev=False,
        exit_on_error=False,
    )

    parser.add_argument(
        "-a",
        "--assembly",
        "--assemblies",
        dest="assemblies",
        action="append",
        default=None,
        metavar="PATHS",
        help="Path to input assembly, or a system assembly name (required)",
    )
    parser.add_argument(
        "-f",
        "--framework",
        dest="framework",
        default=None,
        metavar="TFM",
        help="Target framework of system assemblies (optional)",
    )
    parser.add_argument(
        "-p",
        "--pack",
        "--packs",
        dest="packs",
        action="append",
        default=None,
        metavar="NAMES",
        help="Targeting pack (optional, multiple)",
    )
    parser.add_argument(
        "-r",
        "--reference",
        "--references",
        dest="references",
        action="append",
        default=None,
        metavar="PATHS",
        help="Path to reference assembly (optional, multiple)",
    )
    parser.add_argument(
        "-t",
        "--typedef",
        "--typedefs",
        dest="typedefs",
        action="append",
        default=None,
        metavar="PATHS",
        help="Path to output type definitions file (required)",
    )
    parser.add_argument(
        "-m",
        "--module",
        "--modules",
        dest="module_format",
        default=None,
        metavar="FORMAT",
        help="Generate JS loader module(s) alongside typedefs: 'commonjs' or 'esm'",
    )
    parser.add_argument(
        "--nowarn",
        dest="nowarn",
        action="store_true",
        default=False,
        help="Suppress warnings",
    )

    return parser


def format_usage() -> str:
    return build_argument_parser().format_help()


def _usage_error(
    parser: argparse.ArgumentParser, err: argparse.ArgumentError
) -> UsageError:
    actions = {"/".join(action.option_strings): action for action in parser._actions}
    action = actions.get(err.argument_name or "")
    if action is not None and action.nargs is None:
        return UsageError("MISSING_VALUE", str(err))
    return UsageError("UNRECOGNIZED_ARGUMENT", str(err))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_argument_parser()
    try:
        args, extras = parser.parse_known_args(argv)
    except argparse.ArgumentError as err:
        raise _usage_error(parser, err) from err
    if extras:
        raise UsageError(
            "UNRECOGNIZED_ARGUMENT",
            f"Unrecognized argument: {extras[0]}",
        )
    args.module_format = parse_module_format(args.module_format)
    return args


def split_list(raw_values: Sequence[str] | None) -> tuple[str, ...]:
    """Flatten repeated list options, splitting on PATH_SEPARATOR.

    Empty entries come from concatenating empty upstream item lists and are
    dropped rather than treated as paths.
    """
    if not raw_values:
        return tuple()
    items: list[str] = []
    for raw in raw_values:
        items.extend(item for item in raw.split(PATH_SEPARATOR) if item)
    return tuple(items)


def has_assembly_extension(path: str) -> bool:
    return path.lower().endswith(ASSEMBLY_EXTENSIONS)


def has_typedefs_extension(path: str) -> bool:
    return path.lower().endswith(TYPEDEFS_EXTENSION)


def is_bare_module_name(token: str) -> bool:
    """True for a logical assembly name like "System.Runtime"."""
    if has_assembly_extension(token):
        return False
    return "/" not in token and "\\" not in token


def _file_name(path: str) -> str:
    return re.split(r"[\\/]", path)[-1]


def validate_config(args: argparse.Namespace) -> GenerationConfig:
    assembly_paths = split_list(args.assemblies)
    reference_paths = split_list(args.references)
    typedefs_paths = split_list(args.typedefs)

    for path in assembly_paths:
        if not has_assembly_extension(path) and not is_bare_module_name(path):
            raise ValidationError(
                "INVALID_ASSEMBLY_EXTENSION",
                f"Incorrect assembly file extension: {_file_name(path)}",
                "Assembly paths must end with .dll or .exe.",
            )
    for path in reference_paths:
        if not has_assembly_extension(path):
            raise ValidationError(
                "INVALID_ASSEMBLY_EXTENSION",
                f"Incorrect assembly file extension: {_file_name(path)}",
                "Reference assembly paths must end with .dll or .exe.",
            )
    for path in typedefs_paths:
        if not has_typedefs_extension(path):
            raise ValidationError(
                "INVALID_TYPEDEFS_EXTENSION",
                f"Incorrect typedef file extension: {_file_name(path)}",
                "Type definitions paths must end with .d.ts.",
            )

    if not assembly_paths:
        raise ValidationError(
            "MISSING_ASSEMBLY",
            "Specify an assembly file path.",
            "Pass -a /path/to/Assembly.dll",
        )
    if not typedefs_paths:
        raise ValidationError(
            "MISSING_TYPEDEFS",
            "Specify a type definitions file path.",
            "Pass -t /path/to/Assembly.d.ts",
        )
    if len(typedefs_paths) != len(assembly_paths):
        raise ValidationError(
            "TYPEDEFS_COUNT_MISMATCH",
            "Specify a type definitions file path for every assembly.",
            f"Got {len(assembly_paths)} assemblies and "
            f"{len(typedefs_paths)} type definitions paths.",
        )

    return GenerationConfig(
        assemblies=tuple(InputModule(path) for path in assembly_paths),
        reference_paths=reference_paths,
        reference_directories=tuple(),
        typedefs_paths=typedefs_paths,
        module_format=args.module_format,
        suppress_warnings=bool(args.nowarn),
        target_framework=args.framework,
        target_packs=split_list(args.packs),
    )


# ===--- Host runtime discovery ---=== #


class RuntimeVersion(NamedTuple):
    major: int
    minor: int
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class HostRuntime:
    """An installed .NET runtime.

    Attributes:
        version: Runtime version, e.g. RuntimeVersion(8, 0, 1).
        directory: Runtime directory, normally
            <dotnet root>/shared/Microsoft.NETCore.App/<version>.
    """

    version: RuntimeVersion
    directory: Path


_RUNTIME_LINE_RE = re.compile(
    r"^(?P<name>\S+) (?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)(?P<suffix>\S*) "
    r"\[(?P<location>.+)\]$"
)


def parse_runtime_listing(text: str) -> HostRuntime | None:
    """Pick the newest Microsoft.NETCore.App from `dotnet --list-runtimes`.

    Each line looks like:
        Microsoft.NETCore.App 8.0.1 [/usr/share/dotnet/shared/Microsoft.NETCore.App]

    Returns:
        HostRuntime for the highest version, or None when no line matches.
    """
    best: HostRuntime | None = None
    for line in text.splitlines():
        match = _RUNTIME_LINE_RE.match(line.strip())
        if match is None or match.group("name") != RUNTIME_LIST_NAME:
            continue
        version = RuntimeVersion(
            int(match.group("major")),
            int(match.group("minor")),
            int(match.group("patch")),
        )
        version_dir = (
            f"{match.group('major')}.{match.group('minor')}."
            f"{match.group('patch')}{match.group('suffix')}"
        )
        candidate = HostRuntime(
            version=version,
            directory=Path(match.group("location")) / version_dir,
        )
        if best is None or candidate.version > best.version:
            best = candidate
    return best


def locate_host_runtime(dotnet: str = "dotnet") -> HostRuntime | None:
    """Find the host .NET runtime by asking the dotnet host.

    Returns None when dotnet is not installed or reports no runtimes.
    """
    try:
        result = subprocess.run(
            [dotnet, "--list-runtimes"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return None
    if result.returncode != 0:
        return None
    return parse_runtime_listing(result.stdout)


def runtime_root(host: HostRuntime) -> Path:
    # <root>/shared/Microsoft.NETCore.App/<version>
    return host.directory.parents[2]


def current_framework_target(host: HostRuntime) -> str:
    if host.version.major == 4:
        return LEGACY_FRAMEWORK_TARGET
    return f"net{host.version.major}.{host.version.minor}"


# ===--- Platform target resolution ---=== #


@dataclass(frozen=True)
class PlatformTarget:
    label: str
    legacy: bool


def strip_platform_suffix(label: str) -> str:
    """Drop a platform qualifier, e.g. "net6.0-windows" -> "net6.0"."""
    return label.split("-", 1)[0]


def resolve_platform_target(
    framework: str | None, host: HostRuntime | None
) -> PlatformTarget | None:
    """Pick the platform label from -f, or from the host runtime.

    Returns None when no label was given and no host runtime was found;
    explicit assembly paths still generate, bare names stay unresolved.
    """
    if framework is None:
        if host is None:
            print("No .NET runtime found; system assemblies were not searched")
            return None
        framework = current_framework_target(host)

    label = strip_platform_suffix(framework)
    return PlatformTarget(label=label, legacy=label.startswith(LEGACY_LABEL_PREFIX))


def legacy_reference_directory(label: str, legacy_root: Path) -> Path:
    digits = [ch for ch in label[len("net"):] if ch != "."]
    return legacy_root / ("v" + ".".join(digits))


def find_pack_reference_directory(
    dotnet_root: Path, pack: str, label: str
) -> Path | None:
    """Find the newest version of a targeting pack that targets label.

    Version directories are compared by name, newest (greatest) first. A
    pack with no version exposing ref/<label> contributes nothing.
    """
    pack_dir = dotnet_root / "packs" / f"{pack}.Ref"
    if not pack_dir.is_dir():
        return None

    version_dirs = sorted(
        (child for child in pack_dir.iterdir() if child.is_dir()),
        key=lambda child: child.name,
        reverse=True,
    )
    for version_dir in version_dirs:
        candidate = version_dir / "ref" / label
        if candidate.is_dir():
            return candidate
    return None


def resolve_reference_directories(
    target: PlatformTarget,
    packs: Sequence[str],
    host: HostRuntime | None,
    legacy_root: Path = LEGACY_REFERENCE_ROOT,
) -> tuple[ReferenceDirectory, ...]:
    """Compute the ordered reference assembly directories for a target.

    Args:
        target: Platform label with its legacy flag.
        packs: Targeting pack names in request order. Ignored for legacy
            targets; defaults to DEFAULT_TARGET_PACK when empty.
        host: Host runtime whose install root holds the packs/ directory.
        legacy_root: Root of the .NET Framework reference assemblies.

    Returns:
        Existing directories in search priority order. Packs requested later
        come first so they override earlier packs.
    """
    if target.legacy:
        if packs:
            print("Ignoring target packs for .NET Framework target")
        directory = legacy_reference_directory(target.label, legacy_root)
        if directory.is_dir():
            return (
                ReferenceDirectory(directory, DirectoryOrigin.LEGACY_RUNTIME_BASELINE),
            )
        return tuple()

    requested = tuple(packs) or (DEFAULT_TARGET_PACK,)
    if host is None:
        print("No .NET runtime found; targeting packs were not searched")
        return tuple()

    dotnet_root = runtime_root(host)
    found: list[ReferenceDirectory] = []
    for pack in requested:
        directory = find_pack_reference_directory(dotnet_root, pack, target.label)
        if directory is not None:
            found.append(ReferenceDirectory(directory, DirectoryOrigin.PLATFORM_BUNDLE))

    found.reverse()
    return tuple(found)


# ===--- System assembly resolution ---=== #


@dataclass(frozen=True)
class ResolutionWarning:
    module_name: str
    searched: tuple[Path, ...]


def find_system_assembly(
    name: str, directories: Sequence[ReferenceDirectory]
) -> Path | None:
    for directory in directories:
        candidate = directory.path / (name + SYSTEM_ASSEMBLY_EXTENSION)
        if candidate.is_file():
            return candidate.absolute()
    return None


def resolve_system_modules(
    assemblies: Sequence[InputModule],
    directories: Sequence[ReferenceDirectory],
) -> tuple[tuple[InputModule, ...], tuple[ResolutionWarning, ...]]:
    """Bind bare assembly names to files in the reference directories.

    Tokens that already carry an assembly extension are kept as given. A
    name found nowhere is kept unchanged and reported as a warning; the
    generator fails later only if it actually needs that file.
    """
    resolved: list[InputModule] = []
    warnings: list[ResolutionWarning] = []
    for module in assemblies:
        if has_assembly_extension(module.path):
            resolved.append(module)
            continue

        system_path = find_system_assembly(module.path, directories)
        if system_path is None:
            resolved.append(module)
            warnings.append(
                ResolutionWarning(
                    module_name=module.path,
                    searched=tuple(d.path for d in directories),
                )
            )
            continue

        resolved.append(InputModule(str(system_path), Provenance.SYSTEM_RESOLVED))
    return tuple(resolved), tuple(warnings)


def format_resolution_warning(warning: ResolutionWarning) -> str:
    lines = [
        f"Assembly '{warning.module_name}' was not found in "
        "reference assembly directories:"
    ]
    lines.extend(f"    {directory}" for directory in warning.searched)
    return "\n".join(lines)


def build_config(
    argv: list[str] | None = None,
    locate_host: Callable[[], HostRuntime | None] | None = None,
    legacy_root: Path = LEGACY_REFERENCE_ROOT,
) -> GenerationConfig:
    """Parse, validate and resolve a command line into a GenerationConfig.

    Each stage finishes before the next starts: grammar, validation, platform
    target, reference directories, then system assembly names.

    Raises:
        UsageError: Malformed command line.
        ValidationError: Bad extensions or mismatched input/output counts.
    """
    config = validate_config(parse_args(argv))

    host = (locate_host or locate_host_runtime)()
    target = resolve_platform_target(config.target_framework, host)
    directories: tuple[ReferenceDirectory, ...] = tuple()
    if target is not None:
        directories = resolve_reference_directories(
            target, config.target_packs, host, legacy_root
        )
    assemblies, warnings = resolve_system_modules(config.assemblies, directories)
    for warning in warnings:
        print(format_resolution_warning(warning))

    return replace(
        config,
        assemblies=assemblies,
        reference_directories=directories,
        target_framework=target.label if target is not None else None,
    )


# ===--- Generator collaborator ---=== #


class TypeDefinitionsGenerator(ABC):
    """Contract for the reflection-and-emission backend."""

    @abstractmethod
    def generate(
        self,
        assembly_path: str,
        reference_paths: Sequence[str],
        reference_directories: Sequence[Path],
        typedefs_path: str,
        module_format: ModuleFormat,
        is_system_assembly: bool,
        suppress_warnings: bool,
    ) -> None:
        """Write typedefs_path (and the loader module, if any) for one assembly."""


_GENERATOR_FACTORIES: list[Callable[[], TypeDefinitionsGenerator]] = []


def register_generator(
    factory: Callable[[], TypeDefinitionsGenerator],
) -> Callable[[], TypeDefinitionsGenerator]:
    """Register a TypeDefinitionsGenerator factory.

    Intended as a decorator in backend modules:

        @register_generator
        def make_generator() -> TypeDefinitionsGenerator:
            return MyGenerator()

    Installed backends expose their module under the "dtsgen.generators"
    entry point group so load_generator can import them.
    """
    _GENERATOR_FACTORIES.append(factory)
    return factory


def load_generator() -> TypeDefinitionsGenerator:
    """Import installed backends and build the most recently registered one.

    An entry point may name a backend module that registers itself with
    register_generator, or name the factory (or generator class) directly.
    """
    for entry_point in entry_points(group=GENERATOR_ENTRY_POINT_GROUP):
        try:
            loaded = entry_point.load()
        except Exception as exc:
            raise CollaboratorFailure(
                f"Failed to load type definitions generator '{entry_point.name}'"
            ) from exc
        if callable(loaded) and loaded not in _GENERATOR_FACTORIES:
            _GENERATOR_FACTORIES.append(loaded)

    if not _GENERATOR_FACTORIES:
        raise CollaboratorFailure(
            "No type definitions generator is installed "
            f"(entry point group '{GENERATOR_ENTRY_POINT_GROUP}')."
        )
    return _GENERATOR_FACTORIES[-1]()


# ===--- Generation ---=== #


@dataclass(frozen=True)
class GenerationResult:
    """Outputs produced for one input assembly.

    Attributes:
        assembly: The resolved input assembly.
        typedefs_path: Type definitions file written by the generator.
        loader_path: Derived JS loader module path, or None when no module
            format was requested.
    """

    assembly: InputModule
    typedefs_path: str
    loader_path: str | None


def reference_set(config: GenerationConfig, index: int) -> tuple[str, ...]:
    """Explicit references plus every other input; never the input itself."""
    others = tuple(
        module.path for i, module in enumerate(config.assemblies) if i != index
    )
    return config.reference_paths + others


def loader_module_path(typedefs_path: str, module_format: ModuleFormat) -> str | None:
    if module_format is ModuleFormat.NONE:
        return None
    return typedefs_path[: -len(TYPEDEFS_EXTENSION)] + LOADER_EXTENSION


def run_generate(
    config: GenerationConfig, generator: TypeDefinitionsGenerator
) -> tuple[GenerationResult, ...]:
    """Invoke the generator once per input assembly, in input order.

    Args:
        config: Resolved GenerationConfig from build_config.
        generator: Backend that writes the type definitions.

    Returns:
        One GenerationResult per input, in input order.

    Raises:
        CollaboratorFailure: The generator failed for some input. Later
            inputs are not processed.
    """
    directories = tuple(d.path for d in config.reference_directories)
    results: list[GenerationResult] = []
    for i, module in enumerate(config.assemblies):
        typedefs_path = config.typedefs_paths[i]
        print(f"{module.path} -> {typedefs_path}")

        try:
            generator.generate(
                module.path,
                reference_set(config, i),
                directories,
                typedefs_path,
                config.module_format,
                module.is_system_assembly,
                config.suppress_warnings,
            )
        except CollaboratorFailure:
            raise
        except Exception as exc:
            raise CollaboratorFailure(
                f"Failed to generate {typedefs_path} from {module.path}: {exc}"
            ) from exc

        loader_path = loader_module_path(typedefs_path, config.module_format)
        if loader_path is not None:
            print(f"{module.path} -> {loader_path}")

        results.append(
            GenerationResult(
                assembly=module,
                typedefs_path=typedefs_path,
                loader_path=loader_path,
            )
        )
    return tuple(results)


# ===--- Summary report ---=== #


@dataclass(frozen=True)
class GenerationSummary:
    target_label: str
    reference_directories: tuple[Path, ...]
    typedefs_count: int
    loader_count: int
    system_assembly_count: int


def build_generation_summary(
    config: GenerationConfig, results: Sequence[GenerationResult]
) -> GenerationSummary:
    return GenerationSummary(
        target_label=config.target_framework or "(unknown)",
        reference_directories=tuple(d.path for d in config.reference_directories),
        typedefs_count=len(results),
        loader_count=sum(1 for r in results if r.loader_path is not None),
        system_assembly_count=sum(1 for r in results if r.assembly.is_system_assembly),
    )


def format_generation_summary(summary: GenerationSummary) -> str:
    """Render a GenerationSummary for the console.

    Returns a string with exactly one trailing newline.
    """
    lines = [
        "",
        "Type definitions generated:",
        f"  Target:      {summary.target_label}",
    ]
    if summary.reference_directories:
        lines.append("  References:")
        lines.extend(f"    {d}" for d in summary.reference_directories)
    else:
        lines.append("  References:  (none)")
    lines.append(
        f"  Files:       {summary.typedefs_count} type definitions, "
        f"{summary.loader_count} loader modules"
    )
    if summary.system_assembly_count:
        lines.append(f"  System:      {summary.system_assembly_count} assemblies")
    return "\n".join(lines) + "\n"


def print_generation_summary(summary: GenerationSummary) -> None:
    print(format_generation_summary(summary), end="")


# ===--- Main generation ---=== #


def main(
    argv: list[str] | None = None,
    generator: TypeDefinitionsGenerator | None = None,
) -> None:
    try:
        config = build_config(argv)
    except UsageError as err:
        print(err.message, file=sys.stderr)
        print(format_usage())
        raise SystemExit(1) from err
    except ConfigError as err:
        print(f"Config error [{err.code}]: {err.message}")
        if err.suggestion:
            print(f"Hint: {err.suggestion}")
        raise SystemExit(1) from err
    except OSError as err:
        print(f"Error: {err}")
        raise SystemExit(1) from err

    try:
        if generator is None:
            generator = load_generator()
        results = run_generate(config, generator)
    except CollaboratorFailure as err:
        print(f"Generation failed: {err}", file=sys.stderr)
        raise SystemExit(1) from err

    print_generation_summary(build_generation_summary(config, results))


if __name__ == "__main__":
    # Backends register into the importable dtsgen module, not __main__.
    import dtsgen

    dtsgen.main()
