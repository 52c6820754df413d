# style_builders.py

import math
from typing import Optional

from node_utils import format_number, has_value, is_number, px

EFFECT_CATEGORIES = {
    "DROP_SHADOW": "dropShadows",
    "INNER_SHADOW": "innerShadows",
    "LAYER_BLUR": "layerBlurs",
    "BACKGROUND_BLUR": "backgroundBlurs",
}


def _channel(value) -> int:
    # round half up, Python's round() is banker's rounding
    return int(math.floor(float(value or 0) * 255 + 0.5))


def convert_color(color: dict, opacity: Optional[float] = None) -> dict:
    r, g, b = (_channel(color.get(c)) for c in ("r", "g", "b"))
    alpha = color.get("a", 1)
    if is_number(opacity):
        alpha = round(alpha * opacity, 4)
    return {
        "hex": f"#{r:02x}{g:02x}{b:02x}",
        "rgba": f"rgba({r}, {g}, {b}, {format_number(alpha)})",
        "opacity": alpha,
    }


def parse_paint(paint: dict) -> dict:
    paint_type = paint.get("type")

    if paint_type == "SOLID":
        return {"type": paint_type, **convert_color(paint.get("color") or {}, paint.get("opacity"))}

    if isinstance(paint_type, str) and paint_type.startswith("GRADIENT_"):
        return {
            "type": paint_type,
            "gradientHandlePositions": paint.get("gradientHandlePositions"),
            "gradientStops": [
                {"position": stop.get("position"), "color": convert_color(stop.get("color") or {})}
                for stop in paint.get("gradientStops") or []
            ],
        }

    if paint_type == "IMAGE":
        return {
            "type": paint_type,
            "imageRef": paint.get("imageRef"),
            "scaleMode": paint.get("scaleMode"),
        }

    return {"type": paint_type}


def build_text_style(node: dict) -> dict:
    style = node.get("style")
    if not isinstance(style, dict) or not style:
        return {}

    text_style = {}
    for key in ("fontFamily", "fontWeight", "fontSize"):
        if key in style:
            text_style[key] = style[key]
    if is_number(style.get("lineHeightPx")):
        text_style["lineHeight"] = px(style["lineHeightPx"])
    if is_number(style.get("letterSpacing")):
        text_style["letterSpacing"] = px(style["letterSpacing"])
    for key in ("textCase", "textAlignHorizontal", "textAlignVertical"):
        if key in style:
            text_style[key] = style[key]
    return text_style


def build_simplified_strokes(node: dict) -> dict:
    strokes = {"colors": []}
    if has_value("strokes", node) and isinstance(node["strokes"], list):
        strokes["colors"] = [parse_paint(p) for p in node["strokes"]]

    weight = node.get("strokeWeight")
    if is_number(weight):
        strokes["weights"] = {"top": weight, "right": weight, "bottom": weight, "left": weight}

    individual = node.get("individualStrokeWeights")
    if isinstance(individual, dict):
        strokes["weights"] = {
            side: individual.get(side, 0) for side in ("top", "right", "bottom", "left")
        }

    if node.get("strokeAlign"):
        strokes["align"] = node["strokeAlign"]
    if has_value("strokeDashes", node):
        strokes["dashes"] = node["strokeDashes"]
    return strokes


def _shadow(effect: dict) -> dict:
    offset = effect.get("offset") or {}
    return {
        "color": convert_color(effect.get("color") or {}),
        "offset": {"x": offset.get("x", 0), "y": offset.get("y", 0)},
        "radius": effect.get("radius", 0),
        "spread": effect.get("spread", 0),
    }


def build_simplified_effects(node: dict) -> dict:
    effects = {}
    for effect in node.get("effects") or []:
        if effect.get("visible") is False:
            continue
        category = EFFECT_CATEGORIES.get(effect.get("type"))
        if category is None:
            continue
        if category in ("dropShadows", "innerShadows"):
            entry = _shadow(effect)
        else:
            entry = {"radius": effect.get("radius", 0)}
        effects.setdefault(category, []).append(entry)
    return effects
