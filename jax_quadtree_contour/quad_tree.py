'''Adaptive quadtree that narrows in on the sign changes of a 2D field.'''

import logging
from dataclasses import dataclass

import jax
import jax.numpy as jnp

from .geometry import Cell, check_depths, make_cell

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Leaf:
    '''Terminal cell of the tree, the cells handed to the classifier.'''
    cell: Cell


@dataclass(frozen=True)
class Internal:
    '''A subdivided cell owning exactly four children.'''
    cell: Cell
    top_left: 'Leaf | Internal'
    top_right: 'Leaf | Internal'
    bottom_left: 'Leaf | Internal'
    bottom_right: 'Leaf | Internal'

    @property
    def children(self):
        return (self.top_left, self.top_right, self.bottom_left, self.bottom_right)


def corner_values(field, cell):
    # top-left, top-right, bottom-right, bottom-left
    return tuple(float(field(x, y)) for (x, y) in cell.corners)


def corner_signs(values):
    # taken on the float64 values, an array cast to float32 would flush
    # tiny magnitudes to zero
    return jnp.array([(v > 0) - (v < 0) for v in values])


@jax.jit
def sign_change(values):
    # four corners strictly on the same side of zero sum to +/-4,
    # a zero (or NaN) corner always counts as a possible contour
    return jnp.round(jnp.abs(jnp.sign(values).sum())) != 4


def has_contour(field, origin, extents):
    '''Check if the zero contour of a field might cross a cell.

    Parameters
    ----------
    field : function
        The scalar field, a function of x and y returning a real number.
    origin : tuple
        The (x, y) position of the top-left corner of the cell.
    extents : tuple
        The (dx, dy) size of the cell, both must be strictly positive.

    Returns
    -------
    bool
        False only when all four corners share the same non-zero sign.

    Note: only the corners are sampled, a contour entirely inside the cell
    (or crossing one edge twice) is not detected.
    '''
    return _cell_has_contour(field, make_cell(origin, extents))


def _cell_has_contour(field, cell):
    return bool(sign_change(corner_signs(corner_values(field, cell))))


def build_tree(field, depth, origin, extents, search_depth, plot_depth):
    '''Recursively subdivide a region around the zero contour of a field.

    Parameters
    ----------
    field : function
        The scalar field, a function of x and y returning a real number.
    depth : int
        Depth of the cell described by `origin` and `extents`, 0 for the root.
    origin : tuple
        The (x, y) position of the top-left corner of the region.
    extents : tuple
        The (dx, dy) size of the region, both must be strictly positive.
    search_depth : int
        Every cell is subdivided until this depth is reached, regardless of
        whether a contour was detected in it.
    plot_depth : int
        Number of extra levels a cell containing a contour is refined below
        `search_depth`.

    Returns
    -------
    Leaf or Internal
        The root node of the tree.
    '''
    check_depths(search_depth, plot_depth)
    return _build(field, depth, make_cell(origin, extents), search_depth, plot_depth)


def _build(field, depth, cell, search_depth, plot_depth):
    if depth < search_depth or (
        depth < search_depth + plot_depth and _cell_has_contour(field, cell)
    ):
        return Internal(
            cell,
            *(_build(field, depth + 1, quadrant, search_depth, plot_depth) for quadrant in cell.quadrants())
        )
    return Leaf(cell)


def iter_leaves(node):
    '''Yield the leaf cells of a tree in top-left, top-right, bottom-left,
    bottom-right order.'''
    if isinstance(node, Leaf):
        yield node.cell
        return
    for child in node.children:
        yield from iter_leaves(child)


def leaf_cells(node):
    '''List of the leaf cells of a tree (e.g. to draw the boxes of the tree).'''
    cells = list(iter_leaves(node))
    logger.debug('Quadtree has %d leaf cells', len(cells))
    return cells
