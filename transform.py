# transform.py

import logging
from typing import Optional

from global_vars import GlobalVars
from image_assets import collect_image_assets
from layout_builder import build_simplified_layout
from node_utils import format_number, has_value, is_number, is_visible, px, remove_empty_keys
from style_builders import (
    build_simplified_effects,
    build_simplified_strokes,
    build_text_style,
    parse_paint,
)

logger = logging.getLogger(__name__)


class MalformedFigmaResponse(ValueError):
    """Raised when a Figma response does not have the shape of a file or nodes payload."""


def extract_bounding_box(node: dict) -> Optional[dict]:
    box = node.get("absoluteBoundingBox")
    if not isinstance(box, dict):
        return None
    return {k: box[k] for k in ("x", "y", "width", "height") if k in box}


def extract_border_radius(node: dict) -> Optional[str]:
    radii = node.get("rectangleCornerRadii")
    if isinstance(radii, list) and len(radii) == 4 and all(is_number(r) for r in radii):
        # top-left, top-right, bottom-right, bottom-left
        return " ".join(px(r) for r in radii)
    if is_number(node.get("cornerRadius")):
        return px(node["cornerRadius"])
    return None


def get_component_data(component: dict, component_sets: dict) -> dict:
    name = component.get("name")
    remote = bool(component.get("remote", False))

    # variants report the name of the set they belong to
    set_id = component.get("componentSetId")
    component_set = component_sets.get(set_id) if set_id else None
    if component_set:
        name = component_set.get("name", name)
        remote = remote or bool(component_set.get("remote", False))

    return {"name": name, "remote": remote}


def _property_value(value) -> str:
    if isinstance(value, (bool, int, float)):
        return format_number(value)
    return str(value)


def extract_component_properties(node: dict) -> list:
    properties = node.get("componentProperties")
    if not isinstance(properties, dict):
        return []
    return [
        {
            "name": name,
            "value": _property_value(prop.get("value")),
            "type": prop.get("type"),
        }
        for name, prop in properties.items()
        if isinstance(prop, dict)
    ]


def simplify_node(
    global_vars: GlobalVars,
    node: dict,
    parent: Optional[dict] = None,
    components: Optional[dict] = None,
    component_sets: Optional[dict] = None,
) -> Optional[dict]:
    if not isinstance(node, dict):
        raise MalformedFigmaResponse(f"Expected a node object, got {type(node).__name__}")
    if not is_visible(node):
        return None

    components = components or {}
    component_sets = component_sets or {}
    node_type = node.get("type")

    simplified = {
        "id": node.get("id"),
        "name": node.get("name"),
        "type": node_type,
        "boundingBox": extract_bounding_box(node),
    }

    # Text style
    text_style = build_text_style(node)
    if text_style:
        simplified["textStyle"] = global_vars.find_or_create(text_style, "style")

    # Fills
    fills = node.get("fills")
    if isinstance(fills, list) and fills:
        simplified["fills"] = global_vars.find_or_create([parse_paint(f) for f in fills], "fill")

    # Strokes
    strokes = build_simplified_strokes(node)
    if strokes["colors"]:
        simplified["strokes"] = global_vars.find_or_create(strokes, "stroke")

    # Effects
    effects = build_simplified_effects(node)
    if effects:
        simplified["effects"] = global_vars.find_or_create(effects, "effect")

    # Layout
    layout = build_simplified_layout(node, parent)
    if len(layout) > 1:
        simplified["layout"] = global_vars.find_or_create(layout, "layout")

    if has_value("characters", node):
        simplified["text"] = node["characters"]

    opacity = node.get("opacity")
    if is_number(opacity) and opacity != 1:
        simplified["opacity"] = opacity

    simplified["borderRadius"] = extract_border_radius(node)

    if node_type == "INSTANCE" and has_value("componentId", node):
        # instances are leaves: the component's structure is not repeated here
        component = components.get(node["componentId"])
        if component:
            data = get_component_data(component, component_sets)
            simplified["componentName"] = data["name"]
            simplified["remote"] = data["remote"]
        simplified["componentProperties"] = extract_component_properties(node)
    else:
        children = node.get("children") or []
        if not isinstance(children, list):
            raise MalformedFigmaResponse(f"Node {node.get('id')} has non-list children")
        simplified_children = [
            simplify_node(global_vars, child, node, components, component_sets)
            for child in children
        ]
        simplified["children"] = [c for c in simplified_children if c is not None]

    if node_type == "VECTOR":
        simplified["type"] = "IMAGE-SVG"

    return remove_empty_keys(simplified)


def _collect_roots(data: dict):
    components, component_sets = {}, {}

    if "document" in data:
        document = data["document"]
        if not isinstance(document, dict) or not isinstance(document.get("children", []), list):
            raise MalformedFigmaResponse("File response has no usable 'document'")
        components.update(data.get("components") or {})
        component_sets.update(data.get("componentSets") or {})
        return document.get("children", []), components, component_sets

    if "nodes" in data:
        if not isinstance(data["nodes"], dict):
            raise MalformedFigmaResponse("Nodes response has no usable 'nodes' mapping")
        roots = []
        for node_id, entry in data["nodes"].items():
            if entry and not isinstance(entry, dict):
                raise MalformedFigmaResponse(f"Node entry {node_id} is not an object")
            if not entry or not entry.get("document"):
                logger.warning("Node %s missing from Figma response, skipping", node_id)
                continue
            roots.append(entry["document"])
            components.update(entry.get("components") or {})
            component_sets.update(entry.get("componentSets") or {})
        return roots, components, component_sets

    raise MalformedFigmaResponse("Response has neither 'document' nor 'nodes'")


def parse_figma_response(data: dict, global_vars: Optional[GlobalVars] = None) -> dict:
    """
    Turn a raw ``GET /files/:key`` or ``GET /files/:key/nodes`` payload into
    the simplified design bundle.
    """
    if not isinstance(data, dict):
        raise MalformedFigmaResponse(f"Expected a response object, got {type(data).__name__}")

    roots, components, component_sets = _collect_roots(data)
    global_vars = global_vars if global_vars is not None else GlobalVars()

    nodes = []
    for root in roots:
        simplified = simplify_node(global_vars, root, None, components, component_sets)
        if simplified is not None:
            nodes.append(simplified)

    return {
        "name": data.get("name"),
        "lastModified": data.get("lastModified"),
        "thumbnailUrl": data.get("thumbnailUrl") or "",
        "nodes": nodes,
        "globalVars": global_vars.to_dict(),
        "imageAssets": collect_image_assets(nodes, global_vars),
    }
