'''Decompose a segment graph into ordered polylines.'''

import logging

logger = logging.getLogger(__name__)


def find_components(graph):
    '''Partition the endpoints of a graph into connected components.

    Parameters
    ----------
    graph : SegmentGraph
        The graph to partition, it is not modified.

    Returns
    -------
    list of lists
        One list of endpoints per component.  Components are ordered by
        their first endpoint in the graph's insertion order, endpoints
        within a component in depth first order.
    '''
    components = []
    seen = set()
    for start in graph:
        if start in seen:
            continue
        seen.add(start)
        component = []
        stack = [start]
        while stack:
            endpoint = stack.pop()
            component.append(endpoint)
            for neighbor in graph.get(endpoint):
                if neighbor not in seen:
                    seen.add(neighbor)
                    stack.append(neighbor)
        components.append(component)
    return components


def choose_root(graph, component):
    # an open path has to start at one of its ends,
    # any endpoint will do for a closed loop
    for endpoint in component:
        if graph.degree(endpoint) == 1:
            return endpoint
    return component[0]


def traverse_path(graph, root):
    '''Walk a component from `root`, always moving to the first unvisited neighbour.

    Parameters
    ----------
    graph : SegmentGraph
        The graph to walk, it is not modified.
    root : Point2D or SideEndpoint
        The endpoint to start from.

    Returns
    -------
    list
        The endpoints in the order visited.  When the walk gets stuck on an
        endpoint that still has a (visited) neighbour other than the one it
        came from, that neighbour is appended once more.  For a closed loop
        this repeats the root at the end of the list.
    '''
    path = []
    visited = set()
    previous = None
    current = root
    while current is not None:
        path.append(current)
        visited.add(current)
        neighbors = graph.get(current)
        following = next((n for n in neighbors if n not in visited), None)
        if following is None:
            closing = next((n for n in neighbors if n != previous), None)
            if closing is not None:
                path.append(closing)
        previous, current = current, following
    return path


def extract_paths(graph):
    '''Turn every connected component of a segment graph into one ordered path.

    Parameters
    ----------
    graph : SegmentGraph
        The fully built graph, it is not modified.

    Returns
    -------
    list of lists
        One path per component.

    Note: if a component has endpoints of degree greater than two (saddle
    artifacts) only the branch reached by always taking the first unvisited
    neighbour is followed, so the result depends on the order the segments
    were linked in.
    '''
    paths = [
        traverse_path(graph, choose_root(graph, component))
        for component in find_components(graph)
    ]
    logger.debug('Extracted %d path(s) from %d endpoints', len(paths), len(graph))
    return paths
