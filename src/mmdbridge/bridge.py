"""Convert decoder value trees into native Python objects."""

from .values import Array, Bool, Float, Int, Null, Object, String


def convert(value):
    """Convert a ``GenericValue`` tree into ``dict``/``list``/scalar objects.

    Mapping rules:

    - ``Null`` -> ``None``
    - ``Bool`` -> ``bool``
    - ``Int`` -> ``int``
    - ``Float`` -> ``float``
    - ``String`` -> ``str``
    - ``Array`` -> ``list``, element order kept
    - ``Object`` -> ``dict``, key order kept

    Nesting is walked with an explicit work stack, so the depth of the tree
    is not bounded by the interpreter recursion limit.

    Args:
        value: Root of the tree to convert

    Returns:
        The native equivalent of ``value``

    Raises:
        TypeError: If a node is not one of the ``GenericValue`` variants
    """
    root = [None]
    # Each frame is (node, container to fill, slot in that container).
    stack = [(value, root, 0)]
    while stack:
        node, parent, slot = stack.pop()
        if isinstance(node, Object):
            native = dict.fromkeys(key for key, _ in node.entries)
            stack.extend((child, native, key) for key, child in node.entries)
        elif isinstance(node, Array):
            native = [None] * len(node.items)
            stack.extend(
                (child, native, index) for index, child in enumerate(node.items)
            )
        else:
            native = _convert_scalar(node)
        parent[slot] = native
    return root[0]


def _convert_scalar(node):
    if isinstance(node, Null):
        return None
    if isinstance(node, Bool):
        return bool(node.value)
    if isinstance(node, Int):
        return int(node.value)
    if isinstance(node, Float):
        return float(node.value)
    if isinstance(node, String):
        return str(node.value)
    raise TypeError(f"Not a GenericValue: {type(node).__name__}")
