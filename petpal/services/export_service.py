"""XML export of the animal directory."""
from typing import Iterable, Optional
from xml.sax.saxutils import escape

from petpal.models.animal import Animal


XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_text(value: Optional[str]) -> str:
    """Escape & < > " ' for XML text; None becomes an empty string."""
    if value is None:
        return ""
    return escape(value, XML_ENTITIES)


def render_animals_xml(animals: Iterable[Animal]) -> str:
    """
    Render animals as a flat XML document.

    Each ``<animal>`` carries id, name, category, gender, age and owner, plus
    ``<timestamp>`` when the listing has one. Owner and category must already
    be loaded.
    """
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', "<animals>"]
    for animal in animals:
        lines.append("  <animal>")
        lines.append(f"    <id>{animal.id}</id>")
        lines.append(f"    <name>{escape_text(animal.name)}</name>")
        lines.append(f"    <category>{escape_text(animal.category.name)}</category>")
        lines.append(f"    <gender>{escape_text(animal.gender)}</gender>")
        lines.append(f"    <age>{animal.age}</age>")
        lines.append(f"    <owner>{escape_text(animal.owner.username)}</owner>")
        if animal.timestamp is not None:
            lines.append(f"    <timestamp>{animal.timestamp.isoformat()}</timestamp>")
        lines.append("  </animal>")
    lines.append("</animals>")
    return "\n".join(lines) + "\n"
