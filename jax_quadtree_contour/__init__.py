'''Find the zero value contours of any 2D function with an adaptive quadtree and marching squares.'''


from .zero_contour_finder import (
    compute_contours,
    contour_graph,
    field_wrapper,
    paths_to_arrays,
    path_kind
)
from .geometry import Point2D, SideEndpoint, Cell
from .quad_tree import Leaf, Internal, build_tree, has_contour, iter_leaves, leaf_cells
from .cell_classifier import Side, TRANSITION_TABLE, classify, corner_code
from .segment_graph import KEY_FRACTION, SegmentGraph, endpoint_key
from .path_extractor import extract_paths, find_components, traverse_path

__version__ = '1.0.0'
