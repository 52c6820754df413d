"""
Tool-level behaviour with a fake FigmaService.
"""
import json
from unittest.mock import MagicMock

import yaml

from figma_tools import ImageNode, download_images, fetch_figma_data, normalize_node_id, serialize_design
from figma_client import FigmaAPIError

DESIGN = {
    "name": "Design",
    "lastModified": "2024-01-01T00:00:00Z",
    "thumbnailUrl": "",
    "nodes": [{"id": "1:1", "name": "Frame", "type": "FRAME", "fills": "fill-ABC123"}],
    "globalVars": {"styles": {"fill-ABC123": [{"type": "SOLID", "hex": "#ffffff"}]}},
    "imageAssets": [],
}


def test_normalize_node_id():
    assert normalize_node_id("12-34") == "12:34"
    assert normalize_node_id("12:34") == "12:34"


def test_serialize_yaml_layout():
    text = serialize_design(DESIGN)
    loaded = yaml.safe_load(text)
    assert list(loaded) == ["metadata", "nodes", "globalVars", "imageAssets"]
    assert loaded["metadata"] == {"name": "Design", "lastModified": "2024-01-01T00:00:00Z", "thumbnailUrl": ""}
    assert loaded["nodes"] == DESIGN["nodes"]


def test_serialize_json():
    loaded = json.loads(serialize_design(DESIGN, "json"))
    assert loaded["globalVars"] == DESIGN["globalVars"]


def test_fetch_node_uses_colon_ids():
    service = MagicMock()
    service.get_node.return_value = DESIGN
    text = fetch_figma_data(service, "abc", "1-1", depth=3)

    service.get_node.assert_called_once_with("abc", "1:1", 3)
    assert yaml.safe_load(text)["metadata"]["name"] == "Design"


def test_fetch_whole_file():
    service = MagicMock()
    service.get_file.return_value = DESIGN
    fetch_figma_data(service, "abc")
    service.get_file.assert_called_once_with("abc", None)
    service.get_node.assert_not_called()


def test_fetch_errors_are_returned():
    service = MagicMock()
    service.get_file.side_effect = FigmaAPIError("Figma API request to /files/abc failed", 404, "/files/abc")
    result = fetch_figma_data(service, "abc")
    assert "error" in result
    assert "/files/abc" in result["error"]


def test_download_splits_fills_and_renders():
    service = MagicMock()
    service.get_image_fills.return_value = ["/out/photo.png"]
    service.get_images.return_value = ["/out/icon.svg"]
    nodes = [
        ImageNode(nodeId="1:1", imageRef="ref1", fileName="photo.png"),
        ImageNode(nodeId="1-2", fileName="icon.svg"),
    ]
    result = download_images(service, "abc", nodes, "/out", scale=2)

    service.get_image_fills.assert_called_once_with(
        "abc", [{"nodeId": "1:1", "imageRef": "ref1", "fileName": "photo.png"}], "/out")
    service.get_images.assert_called_once_with(
        "abc", [{"nodeId": "1:2", "fileName": "icon.svg", "fileType": "svg"}], "/out", 2)
    assert result == "Success, 2 images downloaded: /out/photo.png, /out/icon.svg"


def test_download_errors_are_returned():
    service = MagicMock()
    service.get_image_fills.side_effect = OSError("disk full")
    result = download_images(service, "abc", [ImageNode(nodeId="1:1", imageRef="r", fileName="a.png")], "/out")
    assert result == {"error": "Failed to download images: disk full"}


def test_download_reports_skipped_images():
    service = MagicMock()
    service.get_image_fills.return_value = []
    service.get_images.return_value = ["/out/icon.svg"]
    nodes = [
        ImageNode(nodeId="1:1", imageRef="gone", fileName="photo.png"),
        ImageNode(nodeId="1:2", fileName="icon.svg"),
    ]
    result = download_images(service, "abc", nodes, "/out")
    assert result == "Partial, 1 of 2 images downloaded, 1 skipped: /out/icon.svg"
