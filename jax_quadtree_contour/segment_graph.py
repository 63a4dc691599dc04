'''Undirected adjacency map between contour segment endpoints.'''

import logging
import math

from .geometry import Point2D, SideEndpoint

logger = logging.getLogger(__name__)

# Crossings on a shared edge are interpolated independently by both neighbouring
# cells, snapping to this fraction of the finest cell size unifies the last-bit
# differences at any scale of the region.
KEY_FRACTION = 2.0 ** -20


def _quantize(value, resolution):
    value = float(value)
    if resolution is not None and math.isfinite(value):
        value = round(value / resolution) * resolution
    # + 0.0 folds -0.0 into 0.0
    return value + 0.0


def endpoint_key(endpoint, resolution=None):
    '''Hashable, exactly comparable identity of a segment endpoint.

    Parameters
    ----------
    endpoint : Point2D or SideEndpoint
        Either an (x, y) point or a ((x1, y1), (x2, y2)) cell side.
    resolution : float or None, optional
        Each coordinate is snapped to the nearest multiple of this step.
        By default (None) the raw float values are used.

    Returns
    -------
    Point2D or SideEndpoint
        The endpoint with its coordinates quantized.
    '''
    first, second = endpoint
    if isinstance(first, tuple):
        return SideEndpoint(endpoint_key(first, resolution), endpoint_key(second, resolution))
    return Point2D(_quantize(first, resolution), _quantize(second, resolution))


class SegmentGraph:
    '''Symmetric adjacency map keyed by endpoint identity.

    Neighbours are kept in insertion order (a dict used as an ordered set) so
    walking the graph is deterministic for a given sequence of `link` calls.
    '''

    def __init__(self, resolution=None):
        self.resolution = resolution
        self._adjacency = {}

    def key(self, endpoint):
        return endpoint_key(endpoint, self.resolution)

    def link(self, a, b):
        '''Link two endpoints in both directions, linking an existing pair again is a no-op.'''
        a = self.key(a)
        b = self.key(b)
        if a == b:
            logger.debug('Ignoring self link of %s', a)
            return
        self._adjacency.setdefault(a, {})[b] = None
        self._adjacency.setdefault(b, {})[a] = None

    def has(self, endpoint):
        return self.key(endpoint) in self._adjacency

    def get(self, endpoint):
        '''Neighbours of an endpoint in insertion order (empty if the endpoint is unknown).'''
        return tuple(self._adjacency.get(self.key(endpoint), ()))

    def delete(self, endpoint):
        '''Remove an endpoint and every link to it, returns False if it was not present.

        Neighbours left without any link are removed as well.
        '''
        endpoint = self.key(endpoint)
        neighbors = self._adjacency.pop(endpoint, None)
        if neighbors is None:
            return False
        for neighbor in neighbors:
            remaining = self._adjacency[neighbor]
            del remaining[endpoint]
            if not remaining:
                del self._adjacency[neighbor]
        return True

    def degree(self, endpoint):
        return len(self._adjacency.get(self.key(endpoint), ()))

    def edges(self):
        '''Every undirected link once, as (a, b) pairs.'''
        seen = set()
        for a, neighbors in self._adjacency.items():
            for b in neighbors:
                if (b, a) not in seen:
                    seen.add((a, b))
                    yield a, b

    def update(self, other):
        '''Merge the links of another graph (e.g. one built for a single quadrant).'''
        for a, b in other.edges():
            self.link(a, b)

    def copy(self):
        graph = SegmentGraph(self.resolution)
        graph._adjacency = {k: dict(v) for k, v in self._adjacency.items()}
        return graph

    @property
    def size(self):
        return len(self._adjacency)

    def __len__(self):
        return self.size

    def __contains__(self, endpoint):
        return self.has(endpoint)

    def __iter__(self):
        return iter(self._adjacency)

    def __repr__(self):
        return f'SegmentGraph(endpoints={self.size}, resolution={self.resolution})'
