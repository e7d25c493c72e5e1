"""Tests for flattening a topic tree into a layout request."""
from __future__ import annotations

import pytest

from src.layout import ConversionOptions, build_layout_graph, edge_id, estimate_node_size, flatten_topic_tree
from src.xmind import ImageResource, TopicImage, TopicNode, parse_xmind


def _tree() -> TopicNode:
    return TopicNode(id="r", title="Root", children=[
        TopicNode(id="a", title="A", children=[
            TopicNode(id="a1", title="A1"),
            TopicNode(id="a2", title="A2"),
        ]),
        TopicNode(id="b", title="B"),
    ])


def test_node_and_edge_counts() -> None:
    """N topics -> N nodes and N-1 edges, each edge parent -> child."""
    nodes, edges = flatten_topic_tree(_tree(), ConversionOptions())
    assert len(nodes) == 5
    assert len(edges) == 4
    assert [(e.source, e.target) for e in edges] == [("r", "a"), ("a", "a1"), ("a", "a2"), ("r", "b")]


def test_nodes_in_pre_order() -> None:
    nodes, _ = flatten_topic_tree(_tree(), ConversionOptions())
    assert [n.id for n in nodes] == ["r", "a", "a1", "a2", "b"]
    assert nodes[0].label == "Root"


def test_edge_ids() -> None:
    assert edge_id("p", "c") == "edge-p-c"
    _, edges = flatten_topic_tree(_tree(), ConversionOptions())
    assert {e.id for e in edges} == {"edge-r-a", "edge-a-a1", "edge-a-a2", "edge-r-b"}


@pytest.mark.parametrize("title, expected_width", [
    ("", 200),
    ("short", 200),
    ("x" * 25, 200),
    ("x" * 26, 208),
    ("x" * 50, 400),
    ("x" * 200, 400),
])
def test_text_node_width(title: str, expected_width: int) -> None:
    assert estimate_node_size(title, ConversionOptions()) == (expected_width, 80)


def test_text_node_width_respects_custom_defaults() -> None:
    opts = ConversionOptions(default_node_width=300, default_node_height=50)
    assert estimate_node_size("abc", opts) == (300, 50)
    assert estimate_node_size("x" * 45, opts) == (360, 50)


def test_image_node_size() -> None:
    opts = ConversionOptions()
    assert estimate_node_size("Photo", opts, (100, 80)) == (200, 120)
    assert estimate_node_size("Photo", opts, (350, 300)) == (350, 340)
    # image width is capped at 500
    assert estimate_node_size("Photo", opts, (900, 10)) == (500, 80)


def test_image_topic_layout_node() -> None:
    root = TopicNode(id="r", title="Root", children=[
        TopicNode(id="pic", title="Photo", image=TopicImage(src="photo.png", width=100, height=80)),
    ])
    nodes, _ = flatten_topic_tree(root, ConversionOptions())
    pic = nodes[1]
    assert pic.has_image is True
    assert pic.image_src == "photo.png"
    assert (pic.image_width, pic.image_height) == (100, 80)
    assert (pic.width, pic.height) == (200, 120)
    assert nodes[0].has_image is False
    assert nodes[0].image_src is None


def test_missing_image_dimensions_use_resource_size() -> None:
    root = TopicNode(id="r", title="Root", image=TopicImage(src="big.png"))
    images = {"big.png": ImageResource(name="big.png", data=b"x", mime_type="image/png", width=320, height=240)}
    node = flatten_topic_tree(root, ConversionOptions(), images)[0][0]
    assert (node.width, node.height) == (320, 280)
    # the topic's own (absent) dimensions are kept as-is
    assert node.image_width is None


def test_missing_image_dimensions_default() -> None:
    """No topic size and no decodable resource -> 200x150 assumed."""
    root = TopicNode(id="r", title="Root", image=TopicImage(src="gone.png"))
    node = flatten_topic_tree(root, ConversionOptions())[0][0]
    assert (node.width, node.height) == (200, 190)


def test_partial_image_dimensions() -> None:
    root = TopicNode(id="r", title="Root", image=TopicImage(src="gone.png", width=260))
    node = flatten_topic_tree(root, ConversionOptions())[0][0]
    assert (node.width, node.height) == (260, 190)


def test_build_layout_graph_options() -> None:
    opts = ConversionOptions(layout_algorithm="layered", direction="DOWN", node_spacing=40, layer_spacing=90)
    graph = build_layout_graph(_tree(), opts)
    assert graph.root_id == "r"
    assert graph.options == {
        "algorithm": "layered",
        "direction": "DOWN",
        "spacing.nodeNode": "40",
        "spacing.nodeNodeBetweenLayers": "90",
    }
    assert all(isinstance(v, str) for v in graph.options.values())


def test_single_node_tree() -> None:
    graph = build_layout_graph(TopicNode(id="only", title="Only"), ConversionOptions())
    assert [n.id for n in graph.nodes] == ["only"]
    assert graph.edges == []


def test_deep_chain_does_not_recurse() -> None:
    depth = 5000
    root = TopicNode(id="n0", title="t0")
    node = root
    for i in range(1, depth):
        child = TopicNode(id=f"n{i}", title=f"t{i}")
        node.children.append(child)
        node = child
    nodes, edges = flatten_topic_tree(root, ConversionOptions())
    assert len(nodes) == depth
    assert len(edges) == depth - 1


def test_from_parsed_workbook(make_xmind, image_content, png_bytes) -> None:
    wb = parse_xmind(make_xmind(image_content, entries={"resources/photo.png": png_bytes}))
    graph = build_layout_graph(wb.sheets[0].root_topic, ConversionOptions(), wb.images)
    by_id = {n.id: n for n in graph.nodes}
    assert (by_id["pic"].width, by_id["pic"].height) == (200, 120)
    assert (by_id["txt"].width, by_id["txt"].height) == (200, 80)
