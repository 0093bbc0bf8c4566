"""Unit tests for the template registry."""

import asyncio

import pytest

from fileflow.interfaces.template import TemplateNotFoundError
from fileflow.services.registry import TemplateRegistry
from fileflow.strategies.extractors import DocxTextExtractor, PlainTextExtractor
from fileflow.strategies.template_engine import VariableEngine


@pytest.fixture
def registry():
    """Create a registry over the template extractors."""
    return TemplateRegistry(VariableEngine([DocxTextExtractor(), PlainTextExtractor()]), preview_chars=10)


@pytest.fixture
def letter(tmp_path):
    """A plain-text template."""
    path = tmp_path / "letter.txt"
    path.write_text("Dear {{Name}},\nmeeting at {{Location}}.", encoding="utf-8")
    return path


class TestTemplateRegistry:
    """Test suite for TemplateRegistry."""

    def test_register(self, registry, letter):
        """Test that registration extracts the variables once."""
        template = asyncio.run(registry.register(letter))

        assert template.name == "letter"
        assert template.variables == ["Location", "Name"]
        assert registry.get(template.id) is template
        assert len(registry) == 1

    def test_register_docx_with_header(self, registry, make_docx):
        """Test that header variables are part of the template."""
        path = make_docx(["Dear {{Name}}"], header="Ref {{Ref}}")

        template = asyncio.run(registry.register(path, name="Welcome"))

        assert template.name == "Welcome"
        assert template.variables == ["Name", "Ref"]

    def test_unknown_template(self, registry):
        """Test that unknown ids raise TemplateNotFoundError."""
        with pytest.raises(TemplateNotFoundError):
            registry.get("missing")
        with pytest.raises(TemplateNotFoundError):
            asyncio.run(registry.set_default_values("missing", {"a": 1}))
        with pytest.raises(TemplateNotFoundError):
            asyncio.run(registry.delete("missing"))
        assert registry._locks == {}

    def test_default_values_merge(self, registry, letter):
        """Test that saved values are merged, not replaced."""

        async def run_test():
            template = await registry.register(letter)
            await registry.set_default_values(template.id, {"Name": "Alice", "Location": "Paris"})
            return await registry.set_default_values(template.id, {"Location": "Rome"})

        updated = asyncio.run(run_test())

        assert updated.saved_values == {"Name": "Alice", "Location": "Rome"}
        assert registry.get(updated.id).saved_values == updated.saved_values

    def test_concurrent_merges(self, registry, letter):
        """Test that concurrent merges on one template are all applied."""

        async def run_test():
            template = await registry.register(letter)
            await asyncio.gather(
                *(registry.set_default_values(template.id, {f"k{i}": i}) for i in range(20))
            )
            return registry.get(template.id)

        template = asyncio.run(run_test())

        assert template.saved_values == {f"k{i}": i for i in range(20)}

    def test_delete_removes_file(self, registry, letter):
        """Test that deletion drops the template and its document."""
        template = asyncio.run(registry.register(letter))

        asyncio.run(registry.delete(template.id))

        assert not letter.exists()
        assert registry.list() == []
        assert template.id not in registry._locks
        with pytest.raises(TemplateNotFoundError):
            registry.get(template.id)

    def test_list_oldest_first(self, registry, tmp_path):
        """Test that templates are listed in registration order."""

        async def run_test():
            ids = []
            for name in ("a", "b", "c"):
                path = tmp_path / f"{name}.txt"
                path.write_text(f"{{{{{name}}}}}", encoding="utf-8")
                ids.append((await registry.register(path)).id)
            return ids

        ids = asyncio.run(run_test())

        assert [t.id for t in registry.list()] == ids

    def test_stats(self, registry, letter):
        """Test word, character, line and variable counts."""
        template = asyncio.run(registry.register(letter))

        stats = registry.stats(template.id)

        assert stats.word_count == 5
        assert stats.character_count == len("Dear {{Name}},\nmeeting at {{Location}}.")
        assert stats.line_count == 2
        assert stats.variable_count == 2
        assert stats.variables == ["Location", "Name"]

    def test_preview(self, registry, letter):
        """Test that the preview is truncated to the configured length."""
        template = asyncio.run(registry.register(letter))

        preview = registry.preview(template.id)

        assert preview.preview == "Dear {{Nam..."
        assert preview.truncated is True
        assert preview.full_text.startswith("Dear {{Name}}")
