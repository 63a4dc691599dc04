'''Find the zero value contours of a 2D function with an adaptive quadtree.'''

import logging
import jax
import jax.numpy as jnp
from jax.tree_util import Partial

from .cell_classifier import classify_cell
from .geometry import Point2D, SideEndpoint
from .path_extractor import extract_paths
from .quad_tree import build_tree, iter_leaves
from .segment_graph import KEY_FRACTION, SegmentGraph

logger = logging.getLogger(__name__)


def contour_graph(field, tree, interpolate=True, key_fraction=KEY_FRACTION):
    '''Classify every leaf of a quadtree and link the resulting segments.

    Parameters
    ----------
    field : function
        The scalar field the tree was built from.
    tree : Leaf or Internal
        Root of the tree returned by `build_tree`.
    interpolate : bool, optional
        Use interpolated crossing points (True) or cell sides (False) as
        the graph endpoints, by default True.
    key_fraction : float or None, optional
        Endpoint coordinates are snapped to this fraction of the smallest
        leaf cell size, by default `KEY_FRACTION`.  None keys the endpoints
        on exact float equality.

    Returns
    -------
    SegmentGraph
    '''
    cells = list(iter_leaves(tree))
    resolution = None
    if key_fraction is not None:
        resolution = key_fraction * min(min(cell.dx, cell.dy) for cell in cells)
    graph = SegmentGraph(resolution)
    n_segments = 0
    for cell in cells:
        for start, end in classify_cell(field, cell, interpolate=interpolate):
            n_segments += 1
            graph.link(start, end)
    logger.debug(
        'Classified %d leaf cells into %d segments (%d endpoints)',
        len(cells),
        n_segments,
        len(graph)
    )
    return graph


def compute_contours(
    field,
    origin,
    extents,
    search_depth,
    plot_depth,
    interpolate=True,
    key_fraction=KEY_FRACTION
):
    '''Find the zero contours of a 2D function.

    Parameters
    ----------
    field : function
        A function of x and y returning a real number, the contours are
        where it is zero.  It is only ever called with single (x, y) values.
    origin : tuple
        The (x, y) position of the top-left corner of the region to search.
    extents : tuple
        The (dx, dy) size of the region, the region spans x to x + dx and
        y - dy to y.  Both must be strictly positive.
    search_depth : int
        The region is uniformly subdivided this many times before any cell
        is dropped, contours smaller than a cell at this depth can be missed.
    plot_depth : int
        Number of extra subdivisions of the cells containing a contour,
        controls how finely the contours are resolved.
    interpolate : bool, optional
        If True the path points are the linearly interpolated zero crossings
        on the cell sides, otherwise each point is the cell side itself as a
        `SideEndpoint`, by default True.
    key_fraction : float or None, optional
        Before crossings from neighbouring cells are matched up, endpoint
        coordinates are snapped to this fraction of the finest cell size
        (extents / 2 ** (search_depth + plot_depth)), by default
        `KEY_FRACTION`.  None matches on exact float equality.

    Returns
    -------
    list of lists
        One list of endpoints per contour, in order along the contour.  A
        closed contour repeats its first endpoint at the end.

    Note: cells where the contour crosses two opposite corners (saddles) are
    resolved with a fixed diagonal, the field is not sampled any further to
    pick one.
    '''
    tree = build_tree(field, 0, origin, extents, search_depth, plot_depth)
    graph = contour_graph(field, tree, interpolate=interpolate, key_fraction=key_fraction)
    return extract_paths(graph)


def _as_point(endpoint):
    if isinstance(endpoint[0], tuple):
        return SideEndpoint(*endpoint).midpoint
    return Point2D(*endpoint)


def paths_to_arrays(paths):
    '''A helper function to turn the paths from `compute_contours` into arrays
    for plotting.

    Parameters
    ----------
    paths : list of lists
        output of the compute_contours function

    Returns
    -------
    list of jnp.arrays
        One array of shape (number of points, 2) per path.  Side endpoints
        are replaced by the midpoint of the side.
    '''
    return [jnp.array([_as_point(e) for e in path]).reshape(-1, 2) for path in paths]


def path_kind(path):
    '''"closed_loop" if the path returns to its first endpoint, otherwise "end_point".'''
    if len(path) > 2 and path[0] == path[-1]:
        return 'closed_loop'
    return 'end_point'


def field_wrapper(f, jit=True):
    '''Helper wrapper for a field written in Jax

    Parameters
    ----------
    f : function
        The field, a function of x and y
    jit : bool, optional
        If True jit compile the field, by default True.  Only do this if the
        field can be traced by Jax.

    Returns
    -------
    function
        The field wrapped in jax.tree_util.Partial
    '''
    if jit:
        return Partial(jax.jit(f))
    return Partial(f)
