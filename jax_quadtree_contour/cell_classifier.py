'''Marching squares classification of a single terminal cell.'''

import logging
from enum import Enum

import jax
import jax.numpy as jnp

from .geometry import Point2D, SideEndpoint, make_cell
from .quad_tree import corner_signs, corner_values

logger = logging.getLogger(__name__)


class Side(Enum):
    UPPER = 'upper'
    LOWER = 'lower'
    LEFT = 'left'
    RIGHT = 'right'


# index into the corner values (top-left, top-right, bottom-right, bottom-left)
# of the two ends of each edge
_SIDE_CORNERS = {
    Side.UPPER: (0, 1),
    Side.LOWER: (3, 2),
    Side.LEFT: (0, 3),
    Side.RIGHT: (1, 2)
}

# case code -> pairs of sides joined by a segment,
# bits: 8 top-left, 4 top-right, 2 bottom-right, 1 bottom-left
TRANSITION_TABLE = (
    (),
    ((Side.LEFT, Side.LOWER),),
    ((Side.LOWER, Side.RIGHT),),
    ((Side.LEFT, Side.RIGHT),),
    ((Side.UPPER, Side.RIGHT),),
    # saddle, the top-right and bottom-left corners are cut off separately
    ((Side.UPPER, Side.RIGHT), (Side.LEFT, Side.LOWER)),
    ((Side.UPPER, Side.LOWER),),
    ((Side.UPPER, Side.LEFT),),
    ((Side.UPPER, Side.LEFT),),
    ((Side.UPPER, Side.LOWER),),
    # saddle, the top-left and bottom-right corners are cut off separately
    ((Side.UPPER, Side.LEFT), (Side.LOWER, Side.RIGHT)),
    ((Side.UPPER, Side.RIGHT),),
    ((Side.LEFT, Side.RIGHT),),
    ((Side.LOWER, Side.RIGHT),),
    ((Side.LEFT, Side.LOWER),),
    ()
)


@jax.jit
def corner_code(values):
    # ceil(sign * 0.9) maps -1 and 0 to 0 and +1 to 1, so a corner
    # exactly on the contour counts as outside
    bits = jnp.where(jnp.ceil(jnp.sign(values) * 0.9) > 0, 1, 0)
    return (bits * jnp.array([8, 4, 2, 1])).sum()


def code_bits(code):
    '''Split a case code back into the (top-left, top-right, bottom-right,
    bottom-left) corner bits.'''
    return tuple((code >> shift) & 1 for shift in (3, 2, 1, 0))


def side_edge(cell, side):
    '''The two corner points bounding one side of a cell.'''
    (a, b) = _SIDE_CORNERS[side]
    corners = cell.corners
    return SideEndpoint(corners[a], corners[b])


def interpolate_side(cell, side, values, bits):
    '''Linearly interpolate where the field crosses zero along one side of a cell.

    Parameters
    ----------
    cell : Cell
        The cell being classified.
    side : Side
        The side of the cell to interpolate along.
    values : tuple
        Field values at the (top-left, top-right, bottom-right, bottom-left) corners.
    bits : tuple
        The corner bits of the case code, in the same order as `values`.

    Returns
    -------
    Point2D or None
        The crossing point, or None if both ends of the side are on the
        same side of the contour.
    '''
    (a, b) = _SIDE_CORNERS[side]
    if bits[a] == bits[b]:
        return None
    corners = cell.corners
    p1, p2 = corners[a], corners[b]
    v1, v2 = values[a], values[b]
    t = v1 / (v2 - v1)
    return Point2D(p1.x - t * (p2.x - p1.x), p1.y - t * (p2.y - p1.y))


def _resolve_side(cell, side, values, bits, interpolate):
    if interpolate:
        return interpolate_side(cell, side, values, bits)
    (a, b) = _SIDE_CORNERS[side]
    if bits[a] == bits[b]:
        return None
    return side_edge(cell, side)


def classify(field, origin, extents, interpolate=True):
    '''Turn a terminal cell into the contour segments crossing it.

    Parameters
    ----------
    field : function
        The scalar field, a function of x and y returning a real number.
    origin : tuple
        The (x, y) position of the top-left corner of the cell.
    extents : tuple
        The (dx, dy) size of the cell, both must be strictly positive.
    interpolate : bool, optional
        If True the segment endpoints are the interpolated zero crossings
        on the sides of the cell, otherwise they are the sides themselves
        (as `SideEndpoint`), by default True.

    Returns
    -------
    list of tuples
        Zero, one or two (start, end) segments.
    '''
    return classify_cell(field, make_cell(origin, extents), interpolate=interpolate)


def classify_cell(field, cell, interpolate=True):
    values = corner_values(field, cell)
    code = int(corner_code(corner_signs(values)))
    bits = code_bits(code)
    segments = []
    for pair in TRANSITION_TABLE[code]:
        endpoints = [_resolve_side(cell, side, values, bits, interpolate) for side in pair]
        endpoints = [e for e in endpoints if e is not None]
        if len(endpoints) < 2:
            logger.warning(
                'Case %d of the transition table resolved %s to %d endpoint(s) in %s, skipping segment',
                code,
                [side.value for side in pair],
                len(endpoints),
                cell
            )
            continue
        start, end = endpoints
        if start == end:
            # the contour passes exactly through a corner
            logger.debug('Dropping zero length segment at %s in %s', start, cell)
            continue
        segments.append((start, end))
    return segments
