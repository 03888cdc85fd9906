# ecs_diagram/extract.py
"""Lexical extraction of component and entity declarations.

Both extractors recognise one narrow, conventional declaration shape with a
regular expression. They do not balance parentheses, skip comments or
understand string literals: a keyword inside a comment still sets a flag, and
unusual formatting is silently missed.
"""
from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional

from .constants import (
    COMPONENT_FACTORY,
    ENTITY_REF_TOKEN,
    FLAG_KEYWORDS,
    SLOT_ACCESS_PREFIX,
)
from .model import ComponentDefinition, EntityType

# `export const Name = defComponent( ... );` -- ends at the first `);`.
COMPONENT_DECL_RE = re.compile(
    rf"export const (\w+)\s*=\s*{re.escape(COMPONENT_FACTORY)}\(.*?\);",
    re.DOTALL,
)

# `export class Name ... { body }` where the body ends at a closing brace that
# is directly followed by a newline and the class's own column-0 brace.
CLASS_DECL_RE = re.compile(r"export class (\w+)[^{]*\{(.*?)\}\n\}", re.DOTALL)

# `c.Name` as a whole word; `c.Foo` does not match inside `c.FooBar`, and the
# prefix must stand alone (`spec.length`, `x.c.Name` are not accesses).
SLOT_ACCESS_RE = re.compile(
    rf"(?<![\w$.]){re.escape(SLOT_ACCESS_PREFIX)}\.(\w+)\b"
)


def iter_component_declarations(text: str) -> Iterator[tuple[str, str]]:
    """Yield (name, declaration span) for every component declaration in order."""
    for match in COMPONENT_DECL_RE.finditer(text):
        yield match.group(1), match.group(0)


def component_from_declaration(name: str, declaration: str) -> ComponentDefinition:
    flags = {flag: keyword in declaration for flag, keyword in FLAG_KEYWORDS}
    return ComponentDefinition(
        name=name,
        references_entity=ENTITY_REF_TOKEN in declaration,
        **flags,
    )


def extract_components(text: str) -> dict[str, ComponentDefinition]:
    """Map component name -> definition. A repeated name keeps the last declaration."""
    components: dict[str, ComponentDefinition] = {}
    for name, declaration in iter_component_declarations(text):
        components[name] = component_from_declaration(name, declaration)
    return components


def iter_entity_declarations(text: str) -> Iterator[tuple[str, str]]:
    """Yield (class name, class body) for every entity class in order."""
    for match in CLASS_DECL_RE.finditer(text):
        yield match.group(1), match.group(2)


def component_uses(body: str, known_components: Optional[Iterable[str]] = None) -> tuple[str, ...]:
    """Component names accessed in `body`, first-seen order, no duplicates.

    With `known_components`, names outside that set are dropped.
    """
    allowed = set(known_components) if known_components is not None else None
    seen: dict[str, None] = {}
    for match in SLOT_ACCESS_RE.finditer(body):
        name = match.group(1)
        if allowed is not None and name not in allowed:
            continue
        seen.setdefault(name, None)
    return tuple(seen)


def extract_entities(
    text: str, known_components: Optional[Iterable[str]] = None
) -> dict[str, EntityType]:
    """Map entity class name -> EntityType. A repeated class name keeps the last body."""
    known = list(known_components) if known_components is not None else None
    entities: dict[str, EntityType] = {}
    for name, body in iter_entity_declarations(text):
        entities[name] = EntityType(name=name, component_names=component_uses(body, known))
    return entities
