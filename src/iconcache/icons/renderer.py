"""Icon rendering: resolve aliases and turn Iconify icon data into SVG markup.

Everything here is pure: same icon data and options in, same markup out.
"""

from __future__ import annotations

import html
import math
import re

from iconcache.schemas.icons import IconCollection, RenderOptions, ResolvedIcon

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

# Placeholder Iconify bodies use for "inherit the text colour"
CURRENT_COLOR = "currentColor"

# Iconify gives up on alias chains longer than this
MAX_ALIAS_DEPTH = 24

_ID_ATTR = re.compile(r"\sid=\"([^\"]+)\"")


def resolve_icon(collection: IconCollection, name: str) -> ResolvedIcon | None:
    """Look up ``name`` (icon or alias) and merge it into fully-specified icon data.

    Returns None for unknown names, dangling or cyclic alias chains, and
    chains deeper than ``MAX_ALIAS_DEPTH``.
    """
    chain = []
    current = name
    for _ in range(MAX_ALIAS_DEPTH + 1):
        icon = collection.icons.get(current)
        if icon is not None:
            chain.append(icon)
            break
        alias = collection.aliases.get(current)
        if alias is None:
            return None
        chain.append(alias)
        current = alias.parent
    else:
        return None

    # Merge from the real icon outwards; nearer aliases override dimensions
    # and stack their transforms.
    width = height = left = top = None
    rotate = 0
    h_flip = v_flip = False
    for item in reversed(chain):
        width = item.width if item.width is not None else width
        height = item.height if item.height is not None else height
        left = item.left if item.left is not None else left
        top = item.top if item.top is not None else top
        rotate = (rotate + item.rotate) % 4
        h_flip ^= item.h_flip
        v_flip ^= item.v_flip

    return ResolvedIcon(
        body=chain[-1].body,
        width=width if width is not None else collection.width,
        height=height if height is not None else collection.height,
        left=left if left is not None else collection.left,
        top=top if top is not None else collection.top,
        rotate=rotate,
        h_flip=h_flip,
        v_flip=v_flip,
    )


def _fmt(value: float) -> str:
    """Format a number the way it appears in SVG attributes (``24``, not ``24.0``)."""
    if value == 0:
        return "0"  # also folds -0.0
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _scale_size(ratio: float) -> str:
    """Width in ``em`` for a 1em-high icon, rounded up to two decimals."""
    return f"{_fmt(math.ceil(ratio * 100) / 100)}em"


def replace_ids(body: str, prefix: str) -> str:
    """Rename every ``id`` in ``body`` (and references to it) to ``{prefix}{n}``.

    Keeps ids unique when several icons are inlined on one page.
    """
    ids = list(dict.fromkeys(_ID_ATTR.findall(body)))
    if not ids:
        return body

    mapping = {old: f"{prefix}{i}" for i, old in enumerate(ids)}
    alternatives = "|".join(re.escape(old) for old in sorted(ids, key=len, reverse=True))
    pattern = re.compile(rf"(?<=[#;\"])({alternatives})(?=[\"')]|\.[a-z])")
    return pattern.sub(lambda m: mapping[m.group(1)], body)


def icon_to_svg(
    icon: ResolvedIcon,
    options: RenderOptions | None = None,
    *,
    id_prefix: str = "icon-",
) -> str:
    """Render resolved icon data as a standalone ``<svg>`` element."""
    options = options or RenderOptions()

    left, top, width, height = icon.left, icon.top, icon.width, icon.height
    body = icon.body
    transforms: list[str] = []
    rotation = icon.rotate

    if icon.h_flip:
        if icon.v_flip:
            rotation += 2
        else:
            transforms.append(f"translate({_fmt(width + left)} {_fmt(-top)})")
            transforms.append("scale(-1 1)")
            top = left = 0
    elif icon.v_flip:
        transforms.append(f"translate({_fmt(-left)} {_fmt(height + top)})")
        transforms.append("scale(1 -1)")
        top = left = 0

    rotation %= 4
    if rotation == 1:
        center = _fmt(height / 2 + top)
        transforms.insert(0, f"rotate(90 {center} {center})")
    elif rotation == 2:
        transforms.insert(0, f"rotate(180 {_fmt(width / 2 + left)} {_fmt(height / 2 + top)})")
    elif rotation == 3:
        center = _fmt(width / 2 + left)
        transforms.insert(0, f"rotate(-90 {center} {center})")

    if rotation % 2 == 1:
        left, top = top, left
        width, height = height, width

    if transforms:
        body = f'<g transform="{" ".join(transforms)}">{body}</g>'
    body = replace_ids(body, id_prefix)

    if options.size:
        width_attr = height_attr = str(options.size)
    else:
        height_attr = "1em"
        width_attr = _scale_size(width / height)

    attributes: dict[str, str] = {}
    if options.class_name:
        attributes["class"] = html.escape(options.class_name)
    attributes.update({
        "width": width_attr,
        "height": height_attr,
        "viewBox": f"{_fmt(left)} {_fmt(top)} {_fmt(width)} {_fmt(height)}",
        "xmlns": SVG_NS,
        "xmlns:xlink": XLINK_NS,
    })
    attribute_string = " ".join(f'{key}="{value}"' for key, value in attributes.items())
    svg = f"<svg {attribute_string}>{body}</svg>"

    if options.color:
        svg = svg.replace(CURRENT_COLOR, options.color)
    return svg
