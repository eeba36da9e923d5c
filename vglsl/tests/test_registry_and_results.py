import threading

import mock
import pytest

import vglsl
from vglsl import (Config, ParseResult, VirtualPathRegistry,
                   add_virtual_include_path, clear_virtual_include_paths,
                   default_config, default_registry, free_result,
                   parse_memory, remove_virtual_include_path)
from vglsl.exceptions import CapacityExceeded, ParseError
from vglsl.filesystem import FakeReader, FileReader
from vglsl.output import ErrorContext, OutputAccumulator
from vglsl.registry import resolve_virtual_path


def test_registry_add_and_resolve():
    registry = VirtualPathRegistry()
    registry.add("Engine", "libs/engine")
    assert "Engine" in registry
    assert registry.resolve("Engine/a.glsl") == "libs/engine/a.glsl"
    assert registry.resolve("Other/a.glsl") is None
    assert registry.resolve("Engine") is None


def test_registry_update_in_place_keeps_order():
    registry = VirtualPathRegistry([("A", "a"), ("B", "b")])
    registry.add("A", "new_a")
    assert registry.snapshot() == (("A", "new_a"), ("B", "b"))
    assert len(registry) == 2


def test_registry_remove():
    registry = VirtualPathRegistry([("A", "a"), ("B", "b"), ("C", "c")])
    registry.remove("B")
    registry.remove("missing")
    assert list(registry) == [("A", "a"), ("C", "c")]


def test_registry_clear():
    registry = VirtualPathRegistry([("A", "a")])
    registry.clear()
    assert len(registry) == 0
    assert registry.resolve("A/x") is None


@pytest.mark.parametrize("alias, real_prefix", [
    (None, "a"),
    ("", "a"),
    ("A", None),
    ("A/B", "a"),
    (3, "a"),
])
def test_registry_ignores_invalid_input(alias, real_prefix):
    registry = VirtualPathRegistry()
    registry.add(alias, real_prefix)
    registry.remove(alias)
    assert len(registry) == 0


def test_resolve_virtual_path_first_match():
    entries = (("A", "first"), ("B", "second"))
    assert resolve_virtual_path(entries, "B/x/y.glsl") == "second/x/y.glsl"


def test_module_functions_use_default_registry():
    add_virtual_include_path("Vantor", "Examples/Vantor")
    assert default_registry.snapshot() == (("Vantor", "Examples/Vantor"),)
    add_virtual_include_path("Vantor", "Other")
    assert default_registry.snapshot() == (("Vantor", "Other"),)
    remove_virtual_include_path("Vantor")
    assert len(default_registry) == 0
    add_virtual_include_path("A", "a")
    add_virtual_include_path(None, "b")
    remove_virtual_include_path(None)
    clear_virtual_include_paths()
    assert len(default_registry) == 0


def test_registry_concurrent_updates():
    registry = VirtualPathRegistry()

    def worker(index):
        for item in range(50):
            registry.add(f"alias{index}_{item}", f"path{item}")

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(registry) == 8 * 50


def test_default_config():
    config = default_config()
    assert config.base_path == "./"
    assert config.remove_comments is True
    assert config.preserve_lines is False
    assert config.max_include_depth > 0
    assert config.max_output_size > 0
    assert config.virtual_paths is None


def test_config_is_immutable():
    config = default_config()
    with pytest.raises(AttributeError):
        config.base_path = "other"
    changed = config.replace(base_path="other")
    assert changed.base_path == "other"
    assert config.base_path == "./"


@pytest.mark.parametrize("field", [
    "max_include_depth",
    "max_output_size",
    "max_line_length",
    "max_name_length",
    "max_macros",
    "max_conditional_depth",
    "max_argument_nesting",
])
def test_config_rejects_non_positive_limits(field):
    with pytest.raises(ValueError):
        Config(**{field: 0})
    with pytest.raises(TypeError):
        Config(**{field: "10"})


def test_free_result_success():
    result = parse_memory("float value = 1.0;", "test.glsl")
    assert result.success
    assert result.output == "float value = 1.0;\n"
    assert result.error_message is None
    free_result(result)
    free_result(result)
    assert result.output is None
    assert result.error_message is None
    assert result.error_file is None
    assert result.success is False
    assert result.error_line == 0


def test_free_result_failure():
    result = parse_memory("#ifdef X\n", "test.glsl")
    assert not result.success
    assert result.output is None
    assert result.error_line > 0
    free_result(result)
    free_result(result)
    assert result.error_message is None
    assert result.error_file is None
    assert result.error_line == 0


def test_free_result_none():
    free_result(None)


def test_result_truthiness():
    assert ParseResult.ok("x")
    assert not ParseResult.failure("bad", 1, "a.glsl")
    assert not ParseResult()


def test_output_accumulator_growth():
    output = OutputAccumulator(100, initial_capacity=4)
    output.append("abcde")
    assert output.capacity == 10
    output.append("x" * 6)
    assert output.capacity == 22
    assert len(output) == 11
    assert output.take() == "abcde" + "x" * 6
    assert len(output) == 0


def test_output_accumulator_clamped():
    output = OutputAccumulator(30, initial_capacity=4)
    output.append("x" * 20)
    assert output.capacity == 30
    output.append("y" * 10)
    with pytest.raises(CapacityExceeded):
        output.append("z")
    assert len(output) == 30


def test_output_accumulator_ignores_empty_text():
    output = OutputAccumulator(1, initial_capacity=1)
    output.append("")
    output.append_line("")
    assert output.take() == "\n"


def test_error_context_keeps_first_error():
    errors = ErrorContext()
    assert not errors
    first = ParseError("first", 3, "a.glsl")
    assert errors.record(first) is first
    assert errors.record(ParseError("second", 9, "b.glsl")) is first
    assert errors
    assert errors.message == "first"
    assert errors.line_no == 3
    assert errors.filename == "a.glsl"


def test_parse_error_locate_only_once():
    error = ParseError("boom")
    assert str(error) == "boom"
    error.locate(4, "inner.glsl")
    error.locate(9, "outer.glsl")
    assert error.line_no == 4
    assert error.filename == "inner.glsl"
    assert str(error) == "inner.glsl:4: boom"


def test_file_reader_missing_file(tmp_path):
    assert FileReader().read(str(tmp_path / "missing.glsl")) is None
    assert FileReader().read(str(tmp_path)) is None


def test_file_reader_existing_file(tmp_path):
    path = tmp_path / "a.glsl"
    path.write_text("void main() {}\n")
    assert FileReader().read(str(path)) == "void main() {}\n"


def test_parse_file_uses_reader():
    reader = FakeReader({"main.glsl": ["#define A 1\n", "A\n"]})
    result = vglsl.parse_file_ex("main.glsl", default_config(), reader=reader)
    assert result.success
    assert result.output == "1\n"


def test_parse_file_passes_base_path():
    with mock.patch("vglsl.parse_file_ex") as mock_parse:
        vglsl.parse_file("a.glsl", "shaders/")
        filename, config = mock_parse.call_args[0]
        assert filename == "a.glsl"
        assert config.base_path == "shaders/"
        assert config.remove_comments is True
