"""Tests for cc65wrap.options - records, field tables, mapping helpers."""

import pytest

from cc65wrap.options import (
    ASSEMBLER_FEATURES,
    LINKER_TARGETS,
    TARGET_SYSTEMS,
    AssemblerOptions,
    CompilerOptions,
    LinkerOptions,
    ObjectToolOptions,
    OptimizerDisabled,
    OptimizerEnabled,
    coerce_options,
    from_mapping,
    merge_options,
    parse_optimizer,
    snake_case,
    to_mapping,
)


class TestFieldTables:
    @pytest.mark.parametrize(
        "cls", [CompilerOptions, AssemblerOptions, LinkerOptions, ObjectToolOptions]
    )
    def test_every_table_row_is_an_attribute(self, cls: type) -> None:
        instance = cls()
        for opt in cls.FIELDS:
            assert hasattr(instance, opt.name), opt.name

    @pytest.mark.parametrize(
        "cls", [CompilerOptions, AssemblerOptions, LinkerOptions, ObjectToolOptions]
    )
    def test_names_are_unique(self, cls: type) -> None:
        names = [opt.name for opt in cls.FIELDS]
        assert len(names) == len(set(names))

    def test_compiler_specialised_flags(self) -> None:
        flags = {opt.name: opt.flag for opt in CompilerOptions.FIELDS}
        assert flags["define"] == "-D"
        assert flags["include_dirs"] == "-I"
        assert flags["optimizer"] == "-O"

    def test_linker_list_flags(self) -> None:
        lists = [(s.name, s.flag) for s in LinkerOptions.FIELDS if s.kind == "list"]
        assert lists == [
            ("define", "-D"),
            ("force_import", "--force-import"),
            ("lib_paths", "--lib-path"),
            ("libs", "--lib"),
            ("obj_paths", "--obj-path"),
            ("objs", "--obj"),
        ]

    def test_objtool_has_no_list_fields(self) -> None:
        assert all(s.kind in ("bool", "scalar") for s in ObjectToolOptions.FIELDS)

    def test_o65_model_attribute(self) -> None:
        opt = next(s for s in ObjectToolOptions.FIELDS if s.alias == "o65Model")
        assert opt.name == "o65_model"
        assert opt.flag == "--o65-model"


class TestValueSets:
    def test_linker_targets_drop_geos(self) -> None:
        assert "geos" in TARGET_SYSTEMS
        assert "geos" not in LINKER_TARGETS
        assert {"geos-apple", "geos-cbm", "c64", "sim6502"} <= LINKER_TARGETS

    def test_features(self) -> None:
        assert "c_comments" in ASSEMBLER_FEATURES
        assert len(ASSEMBLER_FEATURES) == 12


class TestSnakeCase:
    def test_camel(self) -> None:
        assert snake_case("outputConfigFile") == "output_config_file"

    def test_kebab(self) -> None:
        assert snake_case("include-dirs") == "include_dirs"

    def test_leading_capital(self) -> None:
        assert snake_case("Ln") == "ln"


# ---------------------------------------------------------------------------
# Optimizer parsing
# ---------------------------------------------------------------------------


class TestParseOptimizer:
    def test_passthrough(self) -> None:
        opt = OptimizerEnabled(settings=("r",))
        assert parse_optimizer(opt) is opt

    @pytest.mark.parametrize("value", [None, False, {"enable": False}, {"enable": False, "settings": ["i"]}])
    def test_disabled(self, value: object) -> None:
        assert parse_optimizer(value) == OptimizerDisabled()

    def test_true(self) -> None:
        assert parse_optimizer(True) == OptimizerEnabled()

    def test_string(self) -> None:
        assert parse_optimizer("ir") == OptimizerEnabled(settings=("i", "r"))

    def test_list(self) -> None:
        assert parse_optimizer(["s"]) == OptimizerEnabled(settings=("s",))

    def test_enable_settings_mapping(self) -> None:
        value = {"enable": True, "settings": ["i", "r", "s"]}
        assert parse_optimizer(value) == OptimizerEnabled(settings=("i", "r", "s"))

    def test_enable_flag_on_variants(self) -> None:
        assert OptimizerDisabled.enable is False
        assert OptimizerEnabled.enable is True


# ---------------------------------------------------------------------------
# from_mapping / coerce_options
# ---------------------------------------------------------------------------


class TestFromMapping:
    def test_camel_case_keys(self) -> None:
        opts = from_mapping(
            CompilerOptions,
            {"checkStack": True, "define": ["DEBUG"], "optimizer": {"enable": True, "settings": ["s"]}},
        )
        assert opts.check_stack is True
        assert opts.define == ["DEBUG"]
        assert opts.optimizer == OptimizerEnabled(settings=("s",))

    def test_kebab_and_snake_keys(self) -> None:
        opts = from_mapping(LinkerOptions, {"lib-paths": ["lib"], "start_addr": 0x801})
        assert opts.lib_paths == ["lib"]
        assert opts.start_addr == 0x801

    def test_ln_alias(self) -> None:
        assert from_mapping(LinkerOptions, {"Ln": "labels.txt"}).ln == "labels.txt"

    def test_single_string_for_list(self) -> None:
        assert from_mapping(AssemblerOptions, {"features": "c_comments"}).features == ["c_comments"]

    def test_unknown_key(self) -> None:
        with pytest.raises(KeyError, match="libz"):
            from_mapping(LinkerOptions, {"libz": ["c"]})

    def test_key_of_other_tool_is_rejected(self) -> None:
        with pytest.raises(KeyError):
            from_mapping(ObjectToolOptions, {"define": ["X"]})


class TestCoerceOptions:
    def test_none(self) -> None:
        assert coerce_options(CompilerOptions, None) == CompilerOptions()

    def test_instance_is_returned(self) -> None:
        opts = CompilerOptions(debug=True)
        assert coerce_options(CompilerOptions, opts) is opts

    def test_mapping(self) -> None:
        assert coerce_options(CompilerOptions, {"debug": True}).debug is True

    def test_wrong_record_type(self) -> None:
        with pytest.raises(TypeError, match="CompilerOptions"):
            coerce_options(CompilerOptions, LinkerOptions())


# ---------------------------------------------------------------------------
# merge_options / to_mapping
# ---------------------------------------------------------------------------


class TestMergeOptions:
    def test_override_scalars(self) -> None:
        base = CompilerOptions(target="c64", cpu="6502")
        merged = merge_options(base, CompilerOptions(target="apple2"))
        assert merged.target == "apple2"
        assert merged.cpu == "6502"

    def test_lists_are_concatenated(self) -> None:
        base = CompilerOptions(define=["A"], include_dirs=["inc"])
        merged = merge_options(base, CompilerOptions(define=["B"]))
        assert merged.define == ["A", "B"]
        assert merged.include_dirs == ["inc"]

    def test_base_is_not_mutated(self) -> None:
        base = LinkerOptions(libs=["c64.lib"])
        merge_options(base, LinkerOptions(libs=["extra.lib"]))
        assert base.libs == ["c64.lib"]

    def test_optimizer(self) -> None:
        base = CompilerOptions(optimizer=OptimizerEnabled(settings=("i",)))
        assert merge_options(base, CompilerOptions()).optimizer == OptimizerEnabled(settings=("i",))
        override = CompilerOptions(optimizer=OptimizerEnabled(settings=("s",)))
        assert merge_options(base, override).optimizer == OptimizerEnabled(settings=("s",))

    def test_false_overrides_true(self) -> None:
        merged = merge_options(CompilerOptions(debug=True), CompilerOptions(debug=False))
        assert merged.debug is False


class TestToMapping:
    def test_only_set_fields(self) -> None:
        opts = CompilerOptions(check_stack=True, define=["X"], optimizer=OptimizerEnabled(settings=("r",)))
        assert to_mapping(opts) == {
            "checkStack": True,
            "define": ["X"],
            "optimizer": {"enable": True, "settings": ["r"]},
        }

    def test_mapping_round_trips_through_from_mapping(self) -> None:
        opts = LinkerOptions(ln="vice.lbl", objs=["a.o"], target="c64")
        assert from_mapping(LinkerOptions, to_mapping(opts)) == opts
