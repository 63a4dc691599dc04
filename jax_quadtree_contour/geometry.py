'''Value types shared by the quadtree, the cell classifier and the segment graph.'''

from typing import NamedTuple


class Point2D(NamedTuple):
    x: float
    y: float


class SideEndpoint(NamedTuple):
    '''A cell edge used as a (non-interpolated) contour endpoint.

    Upper and lower edges run left to right, left and right edges run
    top to bottom, so neighbouring cells describe a shared edge with the
    same two points in the same order.
    '''
    start: Point2D
    end: Point2D

    @property
    def midpoint(self):
        (x1, y1), (x2, y2) = self
        return Point2D((x1 + x2) / 2, (y1 + y2) / 2)


class Cell(NamedTuple):
    '''Axis aligned rectangle with its origin at the top-left corner.

    The field uses a "y grows upward" convention so the bottom edge of the
    cell sits at ``y - dy``.
    '''
    x: float
    y: float
    dx: float
    dy: float

    @property
    def top_left(self):
        return Point2D(self.x, self.y)

    @property
    def top_right(self):
        return Point2D(self.x + self.dx, self.y)

    @property
    def bottom_left(self):
        return Point2D(self.x, self.y - self.dy)

    @property
    def bottom_right(self):
        return Point2D(self.x + self.dx, self.y - self.dy)

    @property
    def corners(self):
        # clockwise from the top-left, the order used for the case code bits
        return (self.top_left, self.top_right, self.bottom_right, self.bottom_left)

    def quadrants(self):
        '''The four children of this cell with half the extents, in
        top-left, top-right, bottom-left, bottom-right order.'''
        dx = self.dx / 2
        dy = self.dy / 2
        return (
            Cell(self.x, self.y, dx, dy),
            Cell(self.x + dx, self.y, dx, dy),
            Cell(self.x, self.y - dy, dx, dy),
            Cell(self.x + dx, self.y - dy, dx, dy)
        )


def make_cell(origin, extents):
    '''Build a `Cell` from ``(x, y)`` and ``(dx, dy)`` pairs, validating the extents.'''
    check_extents(extents)
    (x, y) = origin
    (dx, dy) = extents
    return Cell(float(x), float(y), float(dx), float(dy))


def check_extents(extents):
    (dx, dy) = extents
    if not (dx > 0 and dy > 0):
        raise ValueError(f'Cell extents must be strictly positive, got dx={dx}, dy={dy}')


def check_depths(search_depth, plot_depth):
    if search_depth <= 0:
        raise ValueError(f'search_depth must be greater than 0, got {search_depth}')
    if plot_depth <= 0:
        raise ValueError(f'plot_depth must be greater than 0, got {plot_depth}')
