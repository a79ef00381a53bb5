"""options.py - Typed option records for the cc65 toolchain.

One dataclass per external tool (``cc65``, ``ca65``, ``ld65``, ``co65``).
Each record class declares a static, ordered field table (``FIELDS``) that
tells the marshaller in :mod:`cc65wrap.argv` which flag every attribute maps
to and how its value is rendered:

``bool`` / ``scalar``
    Generic fields.  ``False``/``None`` are omitted, ``True`` is a bare flag,
    anything else is the flag followed by ``str(value)``.

``list``
    Repeated fields.  One ``flag value`` pair per element.

``optimizer``
    The compiler's ``-O`` option (see :class:`OptimizerEnabled`).

The enumerated value sets below are typing aids.  Nothing in this package
checks membership; the external binary rejects values it does not know.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal, TypeVar, Union

# ---------------------------------------------------------------------------
# Enumerated value sets
# ---------------------------------------------------------------------------

TargetSystem = Literal[
    "none",
    "apple2",
    "apple2enh",
    "atari",
    "atmos",
    "c16",
    "c64",
    "c128",
    "cbm510",
    "cbm610",
    "geos",
    "lunix",
    "lynx",
    "nes",
    "pet",
    "plus4",
    "supervision",
    "vic20",
]

TARGET_SYSTEMS = frozenset(
    {
        "none",
        "apple2",
        "apple2enh",
        "atari",
        "atmos",
        "c16",
        "c64",
        "c128",
        "cbm510",
        "cbm610",
        "geos",
        "lunix",
        "lynx",
        "nes",
        "pet",
        "plus4",
        "supervision",
        "vic20",
    }
)

# ld65 knows every compiler target except plain "geos", plus a few of its own.
LINKER_TARGETS = (TARGET_SYSTEMS - {"geos"}) | frozenset(
    {
        "module",
        "atari2600",
        "atarixl",
        "geos-apple",
        "geos-cbm",
        "sim6502",
        "sim65c02",
        "telestrat",
    }
)

AssemblerFeature = Literal[
    "at_in_identifiers",
    "c_comments",
    "dollar_in_identifiers",
    "dollar_is_pc",
    "labels_without_colons",
    "leading_dot_in_identifiers",
    "loose_char_term",
    "loose_string_term",
    "missing_char_term",
    "org_per_seg",
    "pc_assignment",
    "ubiquitous_idents",
]

ASSEMBLER_FEATURES = frozenset(
    {
        "at_in_identifiers",
        "c_comments",
        "dollar_in_identifiers",
        "dollar_is_pc",
        "labels_without_colons",
        "leading_dot_in_identifiers",
        "loose_char_term",
        "loose_string_term",
        "missing_char_term",
        "org_per_seg",
        "pc_assignment",
        "ubiquitous_idents",
    }
)

COMPILER_CPUS = frozenset({"6502", "65C02"})
ASSEMBLER_CPUS = frozenset({"6502", "65SC02", "65C02", "65816", "sunplus", "sweet16", "HuC6280"})
C_STANDARDS = frozenset({"c89", "c99", "cc65"})
MEMORY_MODELS = frozenset({"near", "far", "huge"})
O65_MODELS = frozenset({"lunix", "os/a65", "cc65-module"})
OPTIMIZER_SETTINGS = frozenset({"i", "r", "s"})

OptimizerSetting = Literal["i", "r", "s"]

# ---------------------------------------------------------------------------
# Optimizer sum type
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OptimizerDisabled:
    """No ``-O`` token is emitted."""

    enable: ClassVar[bool] = False


@dataclass(frozen=True)
class OptimizerEnabled:
    """Emit ``-O`` followed by the concatenated single-letter settings."""

    settings: tuple[OptimizerSetting, ...] = ()
    enable: ClassVar[bool] = True


Optimizer = Union[OptimizerDisabled, OptimizerEnabled]


def parse_optimizer(value: Any) -> Optimizer:
    """Coerce a loose optimizer description into the sum type.

    Accepts an existing variant, ``None``/``False`` (disabled), ``True``
    (plain ``-O``), a settings string such as ``"ir"``, a list of letters,
    or an ``{"enable": ..., "settings": [...]}`` mapping.
    """
    if isinstance(value, (OptimizerDisabled, OptimizerEnabled)):
        return value
    if value is None or value is False:
        return OptimizerDisabled()
    if value is True:
        return OptimizerEnabled()
    if isinstance(value, str):
        return OptimizerEnabled(settings=tuple(value))  # type: ignore[arg-type]
    if isinstance(value, Mapping):
        if not value.get("enable", False):
            return OptimizerDisabled()
        return OptimizerEnabled(settings=tuple(value.get("settings") or ()))
    return OptimizerEnabled(settings=tuple(value))


# ---------------------------------------------------------------------------
# Field table
# ---------------------------------------------------------------------------

FieldKind = Literal["bool", "scalar", "list", "optimizer"]

_UPPER_RE = re.compile(r"[A-Z]")


def kebab_flag(name: str) -> str:
    """Return the long flag for an option name.

    ``checkStack`` -> ``--check-stack``.  Underscores map to hyphens as well,
    so the snake_case attribute ``check_stack`` yields the same flag.
    """
    return "--" + _UPPER_RE.sub(lambda m: "-" + m.group(0).lower(), name).replace("_", "-")


@dataclass(frozen=True)
class OptionField:
    """One row of a record's field table."""

    name: str
    flag: str
    kind: FieldKind
    alias: str = ""  # camelCase key, as in JSON option objects

    @classmethod
    def derived(cls, alias: str, kind: FieldKind) -> OptionField:
        """Build a field whose flag and attribute name come from *alias*."""
        return cls(name=snake_case(alias), flag=kebab_flag(alias), kind=kind, alias=alias)


def snake_case(name: str) -> str:
    """``outputFile`` -> ``output_file``; ``output-file`` -> ``output_file``."""
    return _UPPER_RE.sub(lambda m: "_" + m.group(0).lower(), name).replace("-", "_").lstrip("_")


def _table(*rows: tuple[str, FieldKind]) -> tuple[OptionField, ...]:
    return tuple(OptionField.derived(alias, kind) for alias, kind in rows)


# ---------------------------------------------------------------------------
# Option records
# ---------------------------------------------------------------------------


@dataclass
class CompilerOptions:
    """Options for ``cc65``."""

    bss_name: str | None = None
    check_stack: bool | None = None
    code_name: str | None = None
    codesize: int | None = None
    cpu: str | None = None
    create_dep: bool | None = None
    data_name: str | None = None
    debug: bool | None = None
    debug_info: bool | None = None
    forget_inc_paths: bool | None = None
    help: bool | None = None
    output_file: str | None = None
    register_space: int | None = None
    register_vars: bool | None = None
    rodata_name: str | None = None
    signed_chars: bool | None = None
    standard: str | None = None
    static_locals: bool | None = None
    target: str | None = None
    verbose: bool | None = None
    version: bool | None = None
    writable_strings: bool | None = None
    add_source: bool | None = None
    define: list[str] = field(default_factory=list)
    include_dirs: list[str] = field(default_factory=list)
    optimizer: Optimizer = field(default_factory=OptimizerDisabled)

    FIELDS: ClassVar[tuple[OptionField, ...]] = _table(
        ("bssName", "scalar"),
        ("checkStack", "bool"),
        ("codeName", "scalar"),
        ("codesize", "scalar"),
        ("cpu", "scalar"),
        ("createDep", "bool"),
        ("dataName", "scalar"),
        ("debug", "bool"),
        ("debugInfo", "bool"),
        ("forgetIncPaths", "bool"),
        ("help", "bool"),
        ("outputFile", "scalar"),
        ("registerSpace", "scalar"),
        ("registerVars", "bool"),
        ("rodataName", "scalar"),
        ("signedChars", "bool"),
        ("standard", "scalar"),
        ("staticLocals", "bool"),
        ("target", "scalar"),
        ("verbose", "bool"),
        ("version", "bool"),
        ("writableStrings", "bool"),
        ("addSource", "bool"),
    ) + (
        OptionField("define", "-D", "list", "define"),
        OptionField("include_dirs", "-I", "list", "includeDirs"),
        OptionField("optimizer", "-O", "optimizer", "optimizer"),
    )


@dataclass
class AssemblerOptions:
    """Options for ``ca65``."""

    cpu: str | None = None
    forget_inc_paths: bool | None = None
    debug_info: bool | None = None
    ignore_case: bool | None = None
    listing: str | bool | None = None
    list_bytes: int | None = None
    macpack_dir: str | None = None
    memory_model: str | None = None
    output_file: str | None = None
    pagelength: int | None = None
    smart_mode: bool | None = None
    target: str | None = None
    verbose: bool | None = None
    auto_import: bool | None = None
    version: bool | None = None
    warning_level: int | None = None
    define: list[str] = field(default_factory=list)
    include_dirs: list[str] = field(default_factory=list)
    features: list[str] = field(default_factory=list)

    FIELDS: ClassVar[tuple[OptionField, ...]] = _table(
        ("cpu", "scalar"),
        ("forgetIncPaths", "bool"),
        ("debugInfo", "bool"),
        ("ignoreCase", "bool"),
        ("listing", "scalar"),
        ("listBytes", "scalar"),
        ("macpackDir", "scalar"),
        ("memoryModel", "scalar"),
        ("outputFile", "scalar"),
        ("pagelength", "scalar"),
        ("smartMode", "bool"),
        ("target", "scalar"),
        ("verbose", "bool"),
        ("autoImport", "bool"),
        ("version", "bool"),
        ("warningLevel", "scalar"),
    ) + (
        OptionField("define", "-D", "list", "define"),
        OptionField("include_dirs", "-I", "list", "includeDirs"),
        OptionField("features", "--feature", "list", "features"),
    )


@dataclass
class LinkerOptions:
    """Options for ``ld65``.

    ``ln`` is the one field whose flag does not follow the kebab rule: it
    renders as ld65's ``-Ln <file>`` (VICE label file), never ``---ln``.
    """

    allow_multiple_definition: bool | None = None
    start_group: bool | None = None
    end_group: bool | None = None
    help: bool | None = None
    mapfile: str | None = None
    output_name: str | None = None
    target: str | None = None
    verbose: bool | None = None
    vm: bool | None = None
    output_config_file: str | None = None
    ln: str | bool | None = None
    start_addr: int | str | None = None
    version: bool | None = None
    cfg_path: str | None = None
    dbgfile: str | None = None
    large_alignment: bool | None = None
    define: list[str] = field(default_factory=list)
    force_import: list[str] = field(default_factory=list)
    lib_paths: list[str] = field(default_factory=list)
    libs: list[str] = field(default_factory=list)
    obj_paths: list[str] = field(default_factory=list)
    objs: list[str] = field(default_factory=list)

    FIELDS: ClassVar[tuple[OptionField, ...]] = (
        _table(
            ("allowMultipleDefinition", "bool"),
            ("startGroup", "bool"),
            ("endGroup", "bool"),
            ("help", "bool"),
            ("mapfile", "scalar"),
            ("outputName", "scalar"),
            ("target", "scalar"),
            ("verbose", "bool"),
            ("vm", "bool"),
            ("outputConfigFile", "scalar"),
        )
        # VICE label file; ld65 spells it as a single-dash short option.
        + (OptionField("ln", "-Ln", "scalar", "Ln"),)
        + _table(
            ("startAddr", "scalar"),
            ("version", "bool"),
            ("cfgPath", "scalar"),
            ("dbgfile", "scalar"),
            ("largeAlignment", "bool"),
        )
        + (
            OptionField("define", "-D", "list", "define"),
            OptionField("force_import", "--force-import", "list", "forceImport"),
            OptionField("lib_paths", "--lib-path", "list", "libPaths"),
            OptionField("libs", "--lib", "list", "libs"),
            OptionField("obj_paths", "--obj-path", "list", "objPaths"),
            OptionField("objs", "--obj", "list", "objs"),
        )
    )


@dataclass
class ObjectToolOptions:
    """Options for ``co65``."""

    bss_label: str | None = None
    bss_name: str | None = None
    code_label: str | None = None
    code_name: str | None = None
    data_label: str | None = None
    data_name: str | None = None
    debug: bool | None = None
    debug_info: bool | None = None
    help: bool | None = None
    o65_model: str | None = None
    no_output: bool | None = None
    output_name: str | None = None
    verbose: bool | None = None
    version: bool | None = None
    zeropage_label: str | None = None
    zeropage_name: str | None = None

    FIELDS: ClassVar[tuple[OptionField, ...]] = _table(
        ("bssLabel", "scalar"),
        ("bssName", "scalar"),
        ("codeLabel", "scalar"),
        ("codeName", "scalar"),
        ("dataLabel", "scalar"),
        ("dataName", "scalar"),
        ("debug", "bool"),
        ("debugInfo", "bool"),
        ("help", "bool"),
        ("o65Model", "scalar"),
        ("noOutput", "bool"),
        ("outputName", "scalar"),
        ("verbose", "bool"),
        ("version", "bool"),
        ("zeropageLabel", "scalar"),
        ("zeropageName", "scalar"),
    )


ToolOptions = Union[CompilerOptions, AssemblerOptions, LinkerOptions, ObjectToolOptions]
OptionsT = TypeVar("OptionsT", CompilerOptions, AssemblerOptions, LinkerOptions, ObjectToolOptions)

# ---------------------------------------------------------------------------
# Construction helpers
# ---------------------------------------------------------------------------


def _lookup(cls: type[ToolOptions]) -> dict[str, OptionField]:
    """Index a field table by attribute name, camelCase alias and kebab name."""
    index: dict[str, OptionField] = {}
    for f in cls.FIELDS:
        index[f.name] = f
        index[f.name.replace("_", "-")] = f
        if f.alias:
            index[f.alias] = f
    return index


def from_mapping(cls: type[OptionsT], mapping: Mapping[str, Any]) -> OptionsT:
    """Build an option record from a plain mapping.

    Keys may be attribute names (``check_stack``), the camelCase names of the
    JSON-style option objects (``checkStack``) or kebab-case (``check-stack``),
    which is how TOML tables in ``cc65wrap.toml`` are usually written.

    Raises:
        KeyError: For a key that is not an option of *cls*.
    """
    index = _lookup(cls)
    kwargs: dict[str, Any] = {}
    for key, value in mapping.items():
        opt = index.get(key)
        if opt is None:
            raise KeyError(f"Unknown {cls.__name__} option: {key!r}")
        if opt.kind == "list":
            value = [value] if isinstance(value, str) else list(value or [])
        elif opt.kind == "optimizer":
            value = parse_optimizer(value)
        kwargs[opt.name] = value
    return cls(**kwargs)


def coerce_options(cls: type[OptionsT], options: OptionsT | Mapping[str, Any] | None) -> OptionsT:
    """Return *options* as a *cls* instance, converting mappings."""
    if options is None:
        return cls()
    if isinstance(options, cls):
        return options
    if isinstance(options, Mapping):
        return from_mapping(cls, options)
    raise TypeError(f"Expected {cls.__name__} or mapping, got {type(options).__name__}")


def merge_options(base: OptionsT, override: OptionsT) -> OptionsT:
    """Overlay *override* on *base* and return a new record.

    Scalar fields of *override* win when they are not ``None``; list fields
    are concatenated with *base* entries first.  An enabled optimizer in
    *override* replaces the one in *base*.
    """
    changes: dict[str, Any] = {}
    for opt in type(base).FIELDS:
        new = getattr(override, opt.name)
        if opt.kind == "list":
            changes[opt.name] = [*getattr(base, opt.name), *new]
        elif opt.kind == "optimizer":
            if isinstance(new, OptimizerEnabled):
                changes[opt.name] = new
        elif new is not None:
            changes[opt.name] = new
    return dataclasses.replace(base, **changes)


def to_mapping(options: ToolOptions) -> dict[str, Any]:
    """Return the set fields of *options* keyed by their camelCase names."""
    out: dict[str, Any] = {}
    for opt in type(options).FIELDS:
        value = getattr(options, opt.name)
        if opt.kind == "optimizer":
            if isinstance(value, OptimizerEnabled):
                out[opt.alias] = {"enable": True, "settings": list(value.settings)}
        elif opt.kind == "list":
            if value:
                out[opt.alias] = list(value)
        elif value is not None:
            out[opt.alias] = value
    return out


def iter_fields(options: ToolOptions, kinds: Iterable[FieldKind]) -> list[tuple[OptionField, Any]]:
    """Return ``(field, value)`` pairs of the requested kinds in table order."""
    wanted = set(kinds)
    return [(f, getattr(options, f.name)) for f in type(options).FIELDS if f.kind in wanted]
