import ast
import textwrap

import pytest

from codable_codegen.pipeline import (
    CodeGeneratorConfig,
    FormatterConfig,
    GenerationError,
    PipelineGenerator,
    Severity,
)
from codable_codegen.pipeline.formatters import BlackFormatter, RuffFormatter, get_formatter

USER_SOURCE = textwrap.dedent(
    '''
    """User models."""

    from __future__ import annotations

    from dataclasses import dataclass

    from codable_codegen import codable


    @codable
    class User:
        id: str
        tags: list[str] = []


    class Untouched:
        pass
    '''
)


class TestPipelineGenerator:
    """End-to-end behavior of the expansion pipeline."""

    def test_generation_comment(self):
        generator = PipelineGenerator(
            USER_SOURCE, source_name="models.py", command_line="codable_codegen models.py out.py"
        )
        output = generator.generate()

        assert output.startswith(
            "# Generated by codable_codegen from models.py\n"
            "# Command: codable_codegen models.py out.py\n"
            "# Edit the @codable declarations and regenerate instead of editing this file.\n"
        )

    def test_generation_comment_without_command(self):
        output = PipelineGenerator(USER_SOURCE, source_name="models.py").generate()

        assert "# Command:" not in output
        assert output.startswith("# Generated by codable_codegen from models.py\n# Edit the")

    def test_output_is_deterministic(self):
        first = PipelineGenerator(USER_SOURCE).generate()
        second = PipelineGenerator(USER_SOURCE).generate()

        assert first == second

    def test_decorator_removed_and_base_added(self):
        config = CodeGeneratorConfig(add_generation_comment=False)
        output = PipelineGenerator(USER_SOURCE, config).generate()

        assert "@codable" not in output
        assert "class User(Codable):" in output
        assert "class Untouched:\n    pass" in output

    def test_imports_follow_docstring_and_future_imports(self):
        config = CodeGeneratorConfig(add_generation_comment=False)
        tree = ast.parse(PipelineGenerator(USER_SOURCE, config).generate())

        assert isinstance(tree.body[0], ast.Expr)
        assert isinstance(tree.body[1], ast.ImportFrom) and tree.body[1].module == "__future__"
        assert isinstance(tree.body[2], ast.Import) and tree.body[2].names[0].name == "json"
        assert tree.body[3].module == "typing"
        assert [a.name for a in tree.body[3].names] == ["Any", "Self"]
        assert tree.body[4].module == "codable_codegen.runtime"
        assert [a.name for a in tree.body[4].names] == [
            "Codable",
            "CodingKey",
            "Decoder",
            "Encoder",
            "InvalidMapShapeError",
            "JSONDecoder",
            "JSONEncoder",
        ]

    def test_other_decorators_are_kept(self):
        source = "@dataclass\n@codable\nclass Point:\n    x: int\n"
        output = PipelineGenerator(source).generate()

        assert "@dataclass\nclass Point(Codable):" in output
        assert "def __init__" not in output

    def test_without_codable_base(self):
        config = CodeGeneratorConfig(add_codable_base=False)
        output = PipelineGenerator("@codable\nclass Point:\n    x: int\n", config).generate()

        assert "class Point:" in output
        assert "Codable," not in output

    def test_custom_runtime_module(self):
        config = CodeGeneratorConfig(runtime_module="app.coding")
        output = PipelineGenerator("@codable\nclass Point:\n    x: int\n", config).generate()

        assert "from app.coding import Codable, CodingKey" in output
        assert "codable_codegen.runtime" not in output

    def test_raw_value_enum_is_left_alone(self):
        source = "from enum import Enum\n\n@codable\nclass Level(str, Enum):\n    low = 'l'\n"
        generator = PipelineGenerator(source)
        output = generator.generate()

        assert "class Level(str, Enum):\n    low = 'l'" in output
        assert "from_decoder" not in output
        assert "codable_codegen.runtime" not in output
        assert [d.severity for d in generator.diagnostics] == [Severity.WARNING]

    def test_syntax_error(self):
        with pytest.raises(SyntaxError):
            PipelineGenerator("class Broken(:\n").generate()


class TestGenerationErrors:
    SOURCE = "@codable\ndef build():\n    pass\n\n@codable\nclass Point:\n    x: int\n"

    def test_fail_on_error(self):
        generator = PipelineGenerator(self.SOURCE, source_name="models.py")

        with pytest.raises(GenerationError) as exc_info:
            generator.generate()

        assert len(exc_info.value.diagnostics) == 1
        assert "models.py:2:0: error [build]: @codable is only applicable" in str(exc_info.value)
        assert generator.errors == exc_info.value.diagnostics

    def test_failed_declarations_are_left_unexpanded(self):
        config = CodeGeneratorConfig(fail_on_error=False)
        generator = PipelineGenerator(self.SOURCE, config)
        output = generator.generate()

        assert "@codable\ndef build():" in output
        assert "class Point(Codable):" in output
        assert len(generator.errors) == 1

    @pytest.mark.parametrize(
        "body, message",
        [
            ("    count = 0\n", "needs an explicit type annotation"),
            ("    x: Annotated[int, coding_key('a'), coding_key('b')]\n", "more than one coding_key marker"),
            ("    x: Annotated[int, coding_key('')]\n", "is empty"),
            ("    x: int\n    y: Annotated[int, coding_key('x')]\n", "both use the wire key 'x'"),
        ],
    )
    def test_error_messages(self, body, message):
        config = CodeGeneratorConfig(fail_on_error=False)
        generator = PipelineGenerator("@codable\nclass Item:\n" + body, config)
        generator.generate()

        assert message in generator.errors[0].message
        assert generator.errors[0].declaration == "Item"


class TestFormatters:
    def test_disabled_formatter(self):
        assert get_formatter(FormatterConfig()) is None

    def test_select_formatter(self):
        assert isinstance(get_formatter(FormatterConfig(enabled=True, tool="black")), BlackFormatter)
        assert isinstance(get_formatter(FormatterConfig(enabled=True, tool="ruff")), RuffFormatter)

    def test_unknown_formatter(self):
        with pytest.raises(ValueError, match="Unknown formatter"):
            get_formatter(FormatterConfig(enabled=True, tool="yapf"))

    def test_black_formatting(self):
        pytest.importorskip("black")
        config = CodeGeneratorConfig(add_generation_comment=False)
        config.formatter = FormatterConfig(enabled=True, tool="black")
        output = PipelineGenerator("@codable\nclass Point:\n    x: int = 0\n", config).generate()

        assert 'x = "x"' in output
        assert "def __init__(self, *, x: int = 0) -> None:" in output


if __name__ == "__main__":
    pytest.main([__file__])
