"""Unit tests for the variable engine."""

import asyncio

import pytest

from fileflow.strategies.extractors import DocxTextExtractor, PlainTextExtractor
from fileflow.strategies.template_engine.variables import (
    VariableEngine,
    extract_from_regions,
    extract_variables,
    find_malformed_placeholders,
    strip_tags,
    substitute,
)


class TestExtractVariables:
    """Test suite for extract_variables."""

    def test_whitespace_invariant(self):
        """Test that interior whitespace does not change the name."""
        assert extract_variables("{{ X }}") == extract_variables("{{X}}") == {"X"}
        assert extract_variables("{{\tX  }}") == {"X"}

    def test_duplicates_collapse(self):
        """Test that repeated placeholders yield one name."""
        text = "{{Name}} and {{ Name }} and {{Other}}"
        assert extract_variables(text) == {"Name", "Other"}

    def test_case_sensitive(self):
        """Test that names differing in case are distinct."""
        assert extract_variables("{{name}} {{Name}}") == {"name", "Name"}

    def test_empty_names_skipped(self):
        """Test that empty tags are never extracted."""
        assert extract_variables("{{   }} {{}}") == set()

    def test_no_placeholders(self):
        """Test text without delimiters."""
        assert extract_variables("Nothing to see here") == set()
        assert extract_variables("") == set()

    def test_regions(self):
        """Test that header/footer markup is stripped before scanning."""
        regions = {"word/header1.xml": "<w:t>{{</w:t><w:t>Ref}}</w:t>"}
        assert extract_from_regions("Body {{Name}}", regions) == {"Name", "Ref"}
        assert extract_from_regions("Body", ["{{Footer}}"]) == {"Footer"}


class TestSubstitute:
    """Test suite for substitute."""

    def test_example_letter(self):
        """Test that missing names become empty strings."""
        text = "Dear {{Name}}, meeting at {{Location}}."
        assert substitute(text, {"Name": "Alice"}) == "Dear Alice, meeting at ."

    def test_identity_without_placeholders(self):
        """Test that placeholder-free text is returned unchanged."""
        text = "No {braces} here } {"
        assert substitute(text, {"braces": "x"}) == text

    def test_value_normalization(self):
        """Test that None becomes empty and other values use str()."""
        assert substitute("{{a}}|{{b}}|{{c}}", {"a": None, "b": 3, "c": 1.5}) == "|3|1.5"

    def test_whitespace_inside_delimiters(self):
        """Test that spaced placeholders resolve to the trimmed name."""
        assert substitute("Hi {{  Name }}!", {"Name": "Bob"}) == "Hi Bob!"

    def test_no_variables_left(self):
        """Test that substituting non-empty literals leaves no placeholders."""
        text = "{{A}} {{ B }} {{C}}{{A}}"
        values = {name: f"value-{name}" for name in extract_variables(text)}
        assert extract_variables(substitute(text, values)) == set()


class TestFindMalformedPlaceholders:
    """Test suite for find_malformed_placeholders."""

    def test_well_formed(self):
        """Test that valid text reports nothing."""
        assert find_malformed_placeholders("{{A}} and {{ B }}") == []
        assert find_malformed_placeholders("no tags") == []

    def test_unclosed(self):
        """Test an opening delimiter that is never closed."""
        problems = find_malformed_placeholders("Hello {{ Name")
        assert problems == ["{{ Name"]

    def test_stray_close(self):
        """Test a closing delimiter that was never opened."""
        problems = find_malformed_placeholders("Hello Name }}")
        assert len(problems) == 1
        assert problems[0].endswith("}}")

    def test_empty_tag(self):
        """Test an empty tag."""
        assert find_malformed_placeholders("a {{ }} b") == ["{{ }}"]

    def test_nested_open(self):
        """Test a tag opened twice before closing."""
        problems = find_malformed_placeholders("{{ a {{ b }}")
        assert problems == ["{{ a {{ b }}"]


class TestVariableEngine:
    """Test suite for VariableEngine."""

    @pytest.fixture
    def engine(self):
        """Create an engine over the template extractors."""
        return VariableEngine([DocxTextExtractor(), PlainTextExtractor()])

    def test_unsupported_extension(self, engine):
        """Test that an unknown extension raises ValueError."""
        with pytest.raises(ValueError):
            engine.get_extractor("report.xlsx")

    def test_text_document(self, engine, tmp_path):
        """Test extraction from a plain-text template."""
        path = tmp_path / "letter.txt"
        path.write_text("Dear {{Name}},\nSee you at {{ Location }}.", encoding="utf-8")

        names, extracted = asyncio.run(engine.extract_document(str(path)))

        assert names == {"Name", "Location"}
        assert "Dear {{Name}}" in extracted.content

    def test_docx_header_variables(self, engine, make_docx):
        """Test that header placeholders are found alongside body ones."""
        path = make_docx(["Dear {{Name}}"], header="Ref: {{Reference}}")

        names, extracted = asyncio.run(engine.extract_document(str(path)))

        assert names == {"Name", "Reference"}
        assert any(name.startswith("word/header") for name in extracted.regions)

    def test_header_entities_match_body_names(self, engine, make_docx):
        """Test that escaped characters in header XML give the same names as the body."""
        path = make_docx(["Dear {{ A&B }}"], header="Ref {{ A&B }} <{{Tag}}>")

        names, extracted = asyncio.run(engine.extract_document(str(path)))

        assert names == {"A&B", "Tag"}
        assert any("{{ A&B }} <{{Tag}}>" in text for text in extracted.regions.values())

    def test_strip_tags_decodes_entities(self):
        """Test that tags are removed and XML entities decoded."""
        assert strip_tags('<w:t xml:space="preserve">{{ A&amp;B }} &lt;x&gt;</w:t>') == "{{ A&B }} <x>"

    def test_missing_file(self, engine):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            asyncio.run(engine.extract_document("/nonexistent/letter.txt"))
