import json

import pytest

from ecs_diagram.config import DiagramConfig
from ecs_diagram.extract import extract_components, extract_entities
from ecs_diagram.graph import build_graph, graph_from_dict, graph_to_dict
from ecs_diagram.model import ComponentDefinition, EntityType, GraphNode, Slot
from ecs_diagram.pipeline import run_graph


def test_undeclared_component_becomes_plain_slot():
    components = {"Bar": ComponentDefinition(name="Bar", references_entity=True)}
    entities = {"Post": EntityType(name="Post", component_names=("Foo", "Bar"))}

    (node,) = build_graph(components, entities)

    assert node.slots == (
        Slot(name="Foo", references_entity=False),
        Slot(name="Bar", references_entity=True),
    )
    assert node.links == ("Bar",)


def test_undeclared_component_from_source_text():
    components = extract_components('export const Bar = defComponent("bar", LoroText);\n')
    entities = extract_entities(
        "export class Post extends EntityWrapper {\n"
        "  get x() {\n"
        "    return [c.Foo, c.Bar];\n"
        "  }\n"
        "}\n"
    )

    (node,) = build_graph(components, entities)

    assert [(s.name, s.references_entity) for s in node.slots] == [
        ("Foo", False),
        ("Bar", False),
    ]
    assert node.links == ()


def test_slots_match_component_names_and_links_are_subset():
    components = {
        "A": ComponentDefinition(name="A", references_entity=True),
        "B": ComponentDefinition(name="B"),
        "C": ComponentDefinition(name="C", references_entity=True),
    }
    entities = {
        "X": EntityType(name="X", component_names=("C", "B", "A")),
        "Y": EntityType(name="Y", component_names=()),
    }

    nodes = build_graph(components, entities)

    assert [n.name for n in nodes] == ["X", "Y"]
    for node in nodes:
        names = tuple(s.name for s in node.slots)
        assert names == entities[node.name].component_names
        assert set(node.links) <= set(names)
    assert nodes[0].links == ("C", "A")
    assert nodes[1].slots == () and nodes[1].links == ()


def test_empty_registries_build_empty_graph():
    assert build_graph({}, {}) == []
    assert graph_to_dict([]) == {"entities": []}


def test_graph_document_shape():
    nodes = [
        GraphNode(
            name="Message",
            slots=(Slot("Content"), Slot("ReplyTo", True)),
            links=("ReplyTo",),
        )
    ]

    assert graph_to_dict(nodes) == {
        "entities": [
            {
                "name": "Message",
                "components": [
                    {"name": "Content", "referencesEntity": False},
                    {"name": "ReplyTo", "referencesEntity": True},
                ],
                "links": ["ReplyTo"],
            }
        ]
    }


def test_graph_document_read_back_recomputes_links():
    doc = {
        "entities": [
            {
                "name": "Channel",
                "components": [
                    {"name": "Name", "referencesEntity": False},
                    {"name": "Threads", "referencesEntity": True},
                ],
                "links": ["Bogus"],
            }
        ]
    }

    (node,) = graph_from_dict(json.loads(json.dumps(doc)))

    assert node.name == "Channel"
    assert node.links == ("Threads",)


@pytest.mark.parametrize(
    "doc, exc",
    [
        ([], TypeError),
        ({"entities": {}}, TypeError),
        ({"entities": [{"components": []}]}, ValueError),
        ({"entities": [{"name": "A", "components": ["Name"]}]}, ValueError),
    ],
)
def test_malformed_graph_document_rejected(doc, exc):
    with pytest.raises(exc):
        graph_from_dict(doc)


def test_repeated_entity_names_in_graph_document_keep_their_slots():
    doc = {
        "entities": [
            {
                "name": "A",
                "components": [
                    {"name": "Name", "referencesEntity": False},
                    {"name": "Parent", "referencesEntity": True},
                ],
            },
            {"name": "A", "components": [{"name": "Name", "referencesEntity": False}]},
            {"name": "B", "components": []},
        ]
    }
    cfg = DiagramConfig(levels={"A": 0, "B": 1}, slot_targets={"Parent": ("B",)})

    result = run_graph(graph_from_dict(doc), cfg)

    first, second, b = result.positioned
    assert [len(e.slots) for e in (first, second, b)] == [2, 1, 0]
    assert [s.links_to for s in first.slots] == [(), ("B",)]
    assert (first.x, second.x) == (150, 400)
