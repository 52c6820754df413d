# layout_builder.py

from typing import Optional

from node_utils import css_shorthand, is_number, px

JUSTIFY_CONTENT = {
    "MIN": "flex-start",
    "CENTER": "center",
    "MAX": "flex-end",
    "SPACE_BETWEEN": "space-between",
}

ALIGN_ITEMS = {
    "MIN": "flex-start",
    "CENTER": "center",
    "MAX": "flex-end",
    "BASELINE": "baseline",
}

AXIS_SIZING = {"FIXED": "fixed", "AUTO": "hug"}

CHILD_SIZING = {"FIXED": "fixed", "HUG": "hug", "FILL": "fill"}


def layout_mode(node: Optional[dict]) -> str:
    mode = (node or {}).get("layoutMode")
    if mode == "HORIZONTAL":
        return "row"
    if mode == "VERTICAL":
        return "column"
    return "none"


def _frame_values(node: dict, mode: str) -> dict:
    values = {}

    overflow = node.get("overflowDirection") or ""
    scroll = [axis for axis, flag in (("x", "HORIZONTAL"), ("y", "VERTICAL")) if flag in overflow]
    if scroll:
        values["overflowScroll"] = scroll

    if mode == "none":
        return values

    values["justifyContent"] = JUSTIFY_CONTENT.get(node.get("primaryAxisAlignItems", "MIN"))
    values["alignItems"] = ALIGN_ITEMS.get(node.get("counterAxisAlignItems", "MIN"))
    sizing = {
        "primary": AXIS_SIZING.get(node.get("primaryAxisSizingMode", "AUTO")),
        "counter": AXIS_SIZING.get(node.get("counterAxisSizingMode", "AUTO")),
    }
    values["sizing"] = {k: v for k, v in sizing.items() if v is not None} or None
    if node.get("layoutWrap") == "WRAP":
        values["wrap"] = True
    if is_number(node.get("itemSpacing")) and node["itemSpacing"]:
        values["gap"] = px(node["itemSpacing"])

    padding = [node.get(f"padding{side}", 0) or 0 for side in ("Top", "Right", "Bottom", "Left")]
    if any(padding):
        values["padding"] = css_shorthand(*padding)
    return values


def _child_values(node: dict, parent: dict) -> dict:
    values = {}

    if node.get("layoutPositioning") == "ABSOLUTE":
        values["position"] = "absolute"
        box = node.get("absoluteBoundingBox")
        parent_box = parent.get("absoluteBoundingBox")
        if isinstance(box, dict) and isinstance(parent_box, dict):
            values["locationRelativeToParent"] = {
                "x": box.get("x", 0) - parent_box.get("x", 0),
                "y": box.get("y", 0) - parent_box.get("y", 0),
            }
        return values

    if node.get("layoutAlign") == "STRETCH":
        values["alignSelf"] = "stretch"
    if is_number(node.get("layoutGrow")) and node["layoutGrow"]:
        values["grow"] = node["layoutGrow"]

    sizing = {
        "horizontal": CHILD_SIZING.get(node.get("layoutSizingHorizontal")),
        "vertical": CHILD_SIZING.get(node.get("layoutSizingVertical")),
    }
    sizing = {k: v for k, v in sizing.items() if v is not None}
    if sizing:
        values["childSizing"] = sizing
    return values


def build_simplified_layout(node: dict, parent: Optional[dict] = None) -> dict:
    """
    Derive a CSS-flavoured layout description for a node.

    The result always carries ``mode`` ("row", "column" or "none"). A dict
    holding nothing but ``mode`` means the node has no layout worth keeping.
    """
    mode = layout_mode(node)
    layout = {"mode": mode}
    layout.update(_frame_values(node, mode))
    if parent is not None and layout_mode(parent) != "none":
        layout.update(_child_values(node, parent))
    return {k: v for k, v in layout.items() if v is not None}
