# image_assets.py

from node_utils import sanitize_file_name


def _image_refs(node: dict, styles: dict) -> list:
    fills = styles.get(node.get("fills"), [])
    if not isinstance(fills, list):
        return []
    return [
        fill["imageRef"]
        for fill in fills
        if isinstance(fill, dict) and fill.get("type") == "IMAGE" and fill.get("imageRef")
    ]


def collect_image_assets(nodes: list, global_vars) -> list:
    """
    List the downloadable images of a simplified tree in document order.

    Each IMAGE-SVG node gives one SVG entry. Image fills give one FILL entry
    per distinct imageRef, owned by the first node seen using it.
    """
    styles = global_vars.styles
    assets = []
    seen_refs = set()

    def visit(node: dict):
        name = sanitize_file_name(node.get("name"))
        if node.get("type") == "IMAGE-SVG":
            assets.append({
                "nodeId": node.get("id"),
                "fileNameSuggestion": f"{name}.svg",
                "type": "SVG",
            })
        for ref in _image_refs(node, styles):
            if ref in seen_refs:
                continue
            seen_refs.add(ref)
            assets.append({
                "nodeId": node.get("id"),
                "fileNameSuggestion": f"{name}_fill.png",
                "type": "FILL",
                "imageRef": ref,
            })
        for child in node.get("children", []):
            visit(child)

    for node in nodes:
        visit(node)
    return assets
