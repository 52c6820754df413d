# node_utils.py


def is_visible(node: dict) -> bool:
    return node.get("visible", True) is not False


def has_value(key: str, node: dict) -> bool:
    value = node.get(key)
    if value is None:
        return False
    if isinstance(value, (list, dict, str)) and not value:
        return False
    return True


def is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_number(value) -> str:
    """Render a number the way JavaScript does: 10.0 -> "10", 0.5 -> "0.5"."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def px(value) -> str:
    return f"{format_number(value)}px"


def css_shorthand(top, right, bottom, left) -> str:
    if top == right == bottom == left:
        return px(top)
    if right == left:
        if top == bottom:
            return f"{px(top)} {px(right)}"
        return f"{px(top)} {px(right)} {px(bottom)}"
    return f"{px(top)} {px(right)} {px(bottom)} {px(left)}"


def sanitize_file_name(name: str) -> str:
    return "".join(c if c.isalnum() else "_" for c in name or "")


def remove_empty_keys(value):
    """Drop None, empty lists and empty dicts, recursively. False and 0 stay."""
    if isinstance(value, list):
        return [remove_empty_keys(v) for v in value]
    if not isinstance(value, dict):
        return value

    cleaned = {}
    for key, item in value.items():
        item = remove_empty_keys(item)
        if item is None:
            continue
        if isinstance(item, (list, dict)) and not item:
            continue
        cleaned[key] = item
    return cleaned
