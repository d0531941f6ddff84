"""Unit tests for the XML export."""
from datetime import datetime, timezone
from types import SimpleNamespace
from xml.etree import ElementTree

from petpal.services.export_service import escape_text, render_animals_xml


def fake_animal(**overrides):
    values = dict(
        id=1,
        name="Rex",
        category=SimpleNamespace(name="Dogs"),
        gender="male",
        age=3,
        owner=SimpleNamespace(username="alice"),
        timestamp=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestEscapeText:
    """Test XML escaping."""

    def test_escapes_reserved_characters(self):
        assert escape_text("a & b < c > d \" e ' f") == (
            "a &amp; b &lt; c &gt; d &quot; e &apos; f"
        )

    def test_none_is_empty(self):
        assert escape_text(None) == ""


class TestRenderAnimalsXml:
    """Test the document layout."""

    def test_empty_directory(self):
        xml = render_animals_xml([])

        assert xml == '<?xml version="1.0" encoding="UTF-8"?>\n<animals>\n</animals>\n'

    def test_single_animal(self):
        xml = render_animals_xml([fake_animal()])

        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<animals>\n  <animal>\n')
        assert "    <id>1</id>\n" in xml
        assert "    <name>Rex</name>\n" in xml
        assert "    <category>Dogs</category>\n" in xml
        assert "    <gender>male</gender>\n" in xml
        assert "    <age>3</age>\n" in xml
        assert "    <owner>alice</owner>\n" in xml
        assert "    <timestamp>2024-01-01T12:00:00+00:00</timestamp>\n" in xml

    def test_timestamp_omitted_when_missing(self):
        xml = render_animals_xml([fake_animal(timestamp=None)])

        assert "<timestamp>" not in xml

    def test_missing_gender_is_empty_element(self):
        xml = render_animals_xml([fake_animal(gender=None)])

        assert "<gender></gender>" in xml

    def test_output_is_well_formed_with_hostile_names(self):
        animals = [
            fake_animal(id=1, name="<script>&\"'"),
            fake_animal(id=2, owner=SimpleNamespace(username="Tom & Jerry")),
        ]

        root = ElementTree.fromstring(render_animals_xml(animals).encode("utf-8"))

        assert [animal.findtext("id") for animal in root] == ["1", "2"]
        assert root[0].findtext("name") == "<script>&\"'"
        assert root[1].findtext("owner") == "Tom & Jerry"
