"""
Image asset extraction from the simplified tree.
"""
from transform import parse_figma_response


def make_file(nodes):
    return {
        "name": "Assets",
        "lastModified": "2024-01-01T00:00:00Z",
        "document": {"id": "0:0", "name": "Document", "type": "DOCUMENT", "children": nodes},
    }


def test_vectors_and_fills_deduplicated_by_image_ref():
    fill_a = {"type": "IMAGE", "imageRef": "ref123", "scaleMode": "FILL"}
    fill_b = {"type": "IMAGE", "imageRef": "ref456", "scaleMode": "FIT"}
    nodes = [
        {"id": "7:1", "name": "Image Fill Node 1", "type": "RECTANGLE", "fills": [fill_a]},
        {"id": "7:2", "name": "Image Fill Node 2", "type": "ELLIPSE", "fills": [fill_b]},
        {"id": "7:3", "name": "Shared Image Fill", "type": "FRAME", "fills": [fill_a]},
        {"id": "7:4", "name": "A_Vector_Also", "type": "VECTOR"},
    ]
    assets = parse_figma_response(make_file(nodes))["imageAssets"]

    assert assets == [
        {"nodeId": "7:1", "fileNameSuggestion": "Image_Fill_Node_1_fill.png", "type": "FILL", "imageRef": "ref123"},
        {"nodeId": "7:2", "fileNameSuggestion": "Image_Fill_Node_2_fill.png", "type": "FILL", "imageRef": "ref456"},
        {"nodeId": "7:4", "fileNameSuggestion": "A_Vector_Also.svg", "type": "SVG"},
    ]


def test_first_node_in_document_order_owns_shared_ref():
    fill = [{"type": "IMAGE", "imageRef": "shared"}]
    nodes = [{
        "id": "1:1", "name": "Outer", "type": "FRAME", "children": [
            {"id": "1:2", "name": "Deep", "type": "FRAME", "children": [
                {"id": "1:3", "name": "Deepest", "type": "RECTANGLE", "fills": fill},
            ]},
            {"id": "1:4", "name": "Later", "type": "RECTANGLE", "fills": fill},
        ],
    }]
    assets = parse_figma_response(make_file(nodes))["imageAssets"]
    assert assets == [{"nodeId": "1:3", "fileNameSuggestion": "Deepest_fill.png", "type": "FILL", "imageRef": "shared"}]


def test_each_vector_gets_its_own_entry():
    nodes = [
        {"id": "6:1", "name": "Icon", "type": "VECTOR"},
        {"id": "6:2", "name": "Icon", "type": "VECTOR"},
    ]
    assets = parse_figma_response(make_file(nodes))["imageAssets"]
    assert [a["nodeId"] for a in assets] == ["6:1", "6:2"]
    assert all(a["fileNameSuggestion"] == "Icon.svg" for a in assets)


def test_invisible_and_instance_children_produce_no_assets():
    nodes = [
        {"id": "2:1", "name": "Hidden", "type": "VECTOR", "visible": False},
        {"id": "2:2", "name": "Instance", "type": "INSTANCE", "componentId": "c1", "children": [
            {"id": "2:3", "name": "Inner", "type": "VECTOR"},
        ]},
    ]
    assert parse_figma_response(make_file(nodes))["imageAssets"] == []


def test_no_assets_without_vectors_or_image_fills():
    nodes = [
        {"id": "8:1", "name": "Just a Box", "type": "RECTANGLE",
         "fills": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 1, "a": 1}}]},
        {"id": "8:2", "name": "Some Text", "type": "TEXT", "characters": "No images here"},
    ]
    assert parse_figma_response(make_file(nodes))["imageAssets"] == []


def test_non_ascii_names_keep_their_letters():
    nodes = [
        {"id": "3:1", "name": "图标", "type": "VECTOR"},
        {"id": "3:2", "name": "按钮 主要", "type": "VECTOR"},
    ]
    assets = parse_figma_response(make_file(nodes))["imageAssets"]
    assert [a["fileNameSuggestion"] for a in assets] == ["图标.svg", "按钮_主要.svg"]
