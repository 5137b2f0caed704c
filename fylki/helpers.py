"""Various auxiliary functions which are used throughout the library."""

import os.path
from collections.abc import Iterable, Iterator

from mako.template import Template


def min_blocks(length: int, block: int) -> int:
    """
    Returns minimum number of blocks with length ``block``
    necessary to cover the array with length ``length``.
    """
    return (length - 1) // block + 1


def wrap_in_tuple(seq_or_elem: None | int | Iterable[int]) -> tuple[int, ...]:
    """
    If ``seq_or_elem`` is a sequence, converts it to a ``tuple``,
    otherwise returns a tuple with a single element ``seq_or_elem``.
    """
    if seq_or_elem is None:
        return tuple()
    if isinstance(seq_or_elem, int):
        return (seq_or_elem,)
    return tuple(seq_or_elem)


def split_range(start: int, stop: int, parts: int) -> Iterator[range]:
    """
    Splits ``range(start, stop)`` into at most ``parts`` contiguous non-empty subranges
    of (almost) equal length, in order.
    """
    length = stop - start
    if length <= 0:
        return
    block = min_blocks(length, max(parts, 1))
    for chunk_start in range(start, stop, block):
        yield range(chunk_start, min(chunk_start + block, stop))


def make_template(template: str, *, filename: bool = False) -> Template:
    kwds = dict(strict_undefined=True, imports=["import numpy"])

    # Creating a template from a filename results in more comprehensible stack traces,
    # so we are taking advantage of this if possible.
    if filename:
        return Template(filename=template, **kwds)
    return Template(template, **kwds)


def template_for(filename: str) -> Template:
    """
    Returns the Mako template object created from the file
    which has the same name as ``filename`` and the extension ``.mako``.
    Typically used in modules as ``template_for(__file__)``.
    """
    name, _ext = os.path.splitext(os.path.abspath(filename))
    return make_template(name + ".mako", filename=True)
