def hex_to_rgba(hex_color: str, opacity: float) -> str:
    """Converts hex color and opacity to rgba string."""
    hex_color = hex_color.lstrip('#')
    r, g, b = tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    return f'rgba({r}, {g}, {b}, {opacity})'


def truncate_label(label: str, max_chars: int) -> str:
    return label[:max_chars]


def fmt(value: float, digits: int = 2) -> str:
    """Compact number formatting for SVG attributes."""
    text = f'{value:.{digits}f}'.rstrip('0').rstrip('.')
    return '0' if text in ('', '-0') else text


def count_label(count: int, noun: str) -> str:
    """'1 node', '3 nodes'."""
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"
