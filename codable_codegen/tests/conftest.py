import sys
import textwrap
import types

import pytest

from codable_codegen.pipeline import CodeGeneratorConfig, PipelineGenerator


def expand_source(source: str, config: CodeGeneratorConfig | None = None) -> str:
    """Expand a declaration source without the generation comment."""
    config = config or CodeGeneratorConfig()
    config.add_generation_comment = False
    return PipelineGenerator(textwrap.dedent(source), config, source_name="models.py").generate()


@pytest.fixture
def expand():
    return expand_source


@pytest.fixture
def load_module(monkeypatch):
    """Expand a declaration source and import the result as a module."""
    counter = {"n": 0}

    def load(source: str, config: CodeGeneratorConfig | None = None) -> types.ModuleType:
        counter["n"] += 1
        name = f"codable_generated_{counter['n']}"
        code = expand_source(source, config)
        module = types.ModuleType(name)
        monkeypatch.setitem(sys.modules, name, module)
        exec(compile(code, f"<{name}>", "exec"), module.__dict__)
        return module

    return load
