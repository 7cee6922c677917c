"""Immutable geometry of an unstructured Voronoi mesh.

The MeshGeometry stores only what the edge-based velocity solvers need: the
two cells and two vertices on either side of every edge, the distances
between them, and the sigma coordinate of each layer center. Cell-to-cell
lines cross edges at right angles and vertex-to-vertex lines run along them,
so a finite difference between cells gives the normal derivative and a
finite difference between vertices gives the tangential derivative.

Indices are zero-based. The sigma coordinate is 0 at the ice surface and
1 at the bed.
"""

import functools
import numpy as np
import jax.numpy as jnp
import equinox as eqx
from jaxtyping import Float, Int, Array
from icebento.utils.errors import ShapeMismatch, InvalidParameter


_as_float = functools.partial(jnp.asarray, dtype = float)
_as_int = functools.partial(jnp.asarray, dtype = int)


def layer_center_sigma_from_fractions(fractions) -> Array:
    """Place layer centers given the fraction of the column in each layer.

    Fractions are ordered from the surface down and must sum to one. Each
    center sits halfway between the interfaces bounding its layer.
    """
    fractions = np.asarray(fractions, dtype = float)

    if fractions.ndim != 1 or fractions.size == 0:
        raise ShapeMismatch("Layer thickness fractions must be a non-empty 1D array.")

    if np.any(~(fractions > 0)) or not np.isclose(np.sum(fractions), 1.0):
        raise InvalidParameter("Layer thickness fractions must be positive and sum to one.")

    interfaces = np.concatenate([[0.0], np.cumsum(fractions)])
    return jnp.asarray(0.5 * (interfaces[:-1] + interfaces[1:]))


class MeshGeometry(eqx.Module):
    """Connectivity and metrics of the mesh, fixed for the whole run.

    Attributes:
        cells_on_edge: (nEdges, 2) indices of the cells on either side of each edge.
        vertices_on_edge: (nEdges, 2) indices of the vertices at each end of each edge.
        dc_edge: distance between the two cell centers across each edge.
        dv_edge: distance between the two vertices of each edge.
        layer_center_sigma: sigma coordinate of each layer center.
        number_of_cells: number of cells on the mesh.
        number_of_vertices: number of vertices on the mesh.

    Methods:
        from_landlab: freeze a landlab grid into a MeshGeometry.
        validate: check that the arrays are consistent with each other.
        map_mean_of_edge_cells_to_edge: average cell values onto edges.
        calc_normal_grad_at_edge: difference cell values across edges.
        calc_tangent_grad_at_edge: difference vertex values along edges.
        calc_height_above_bed: height of each layer center above the bed.
    """

    cells_on_edge: Int[Array, "edge 2"] = eqx.field(converter = _as_int)
    vertices_on_edge: Int[Array, "edge 2"] = eqx.field(converter = _as_int)
    dc_edge: Float[Array, "edge"] = eqx.field(converter = _as_float)
    dv_edge: Float[Array, "edge"] = eqx.field(converter = _as_float)
    layer_center_sigma: Float[Array, "level"] = eqx.field(converter = _as_float)
    number_of_cells: int = eqx.field(static = True, converter = int)
    number_of_vertices: int = eqx.field(static = True, converter = int)

    @classmethod
    def from_landlab(cls, grid, layer_center_sigma) -> "MeshGeometry":
        """Build a MeshGeometry from the Voronoi dual of a landlab grid.

        Landlab nodes become cells, corners become vertices, and each face
        becomes one edge. The cells on an edge are the tail and head nodes of
        the link that crosses the face.
        """
        link_at_face = np.asarray(grid.link_at_face)

        return cls(
            cells_on_edge = np.asarray(grid.nodes_at_link)[link_at_face],
            vertices_on_edge = np.asarray(grid.corners_at_face),
            dc_edge = np.asarray(grid.length_of_link)[link_at_face],
            dv_edge = np.asarray(grid.length_of_face),
            layer_center_sigma = layer_center_sigma,
            number_of_cells = grid.number_of_nodes,
            number_of_vertices = grid.number_of_corners
        )

    @property
    def number_of_edges(self) -> int:
        return self.cells_on_edge.shape[0] if self.cells_on_edge.ndim > 0 else 0

    @property
    def number_of_vert_levels(self) -> int:
        return self.layer_center_sigma.size

    def number_of_elements(self, location: str) -> int:
        """Return the number of mesh elements at a location."""
        if location == "cell":
            return self.number_of_cells
        elif location == "vertex":
            return self.number_of_vertices
        elif location == "edge":
            return self.number_of_edges
        else:
            raise ValueError(f"Invalid location {location}.")

    def validate(self) -> None:
        """Check array shapes against each other and the sigma coordinate range."""
        n_edges = self.number_of_edges

        for name in ['cells_on_edge', 'vertices_on_edge']:
            if getattr(self, name).shape != (n_edges, 2):
                raise ShapeMismatch(f"{name} must have shape ({n_edges}, 2).")

        for name in ['dc_edge', 'dv_edge']:
            if getattr(self, name).shape != (n_edges,):
                raise ShapeMismatch(f"{name} must have shape ({n_edges},).")

        if self.layer_center_sigma.ndim != 1 or self.layer_center_sigma.size == 0:
            raise ShapeMismatch("layer_center_sigma must be a non-empty 1D array.")

        sigma = np.asarray(self.layer_center_sigma)
        if np.any(~((sigma >= 0) & (sigma <= 1))):
            raise InvalidParameter("layer_center_sigma must lie within [0, 1].")

    def map_mean_of_edge_cells_to_edge(self, array: Float[Array, "cell"]) -> Float[Array, "edge"]:
        """Average the values at the two cells on each edge."""
        array = jnp.asarray(array)
        return (array[self.cells_on_edge[:, 0]] + array[self.cells_on_edge[:, 1]]) * 0.5

    def calc_normal_grad_at_edge(self, array: Float[Array, "cell"]) -> Float[Array, "edge"]:
        """Directional derivative from the first cell towards the second, sign flipped.

        Positive where the first cell is higher than the second, so that
        downslope flow is positive along the edge normal.
        """
        array = jnp.asarray(array)
        return (array[self.cells_on_edge[:, 0]] - array[self.cells_on_edge[:, 1]]) / self.dc_edge

    def calc_tangent_grad_at_edge(self, array: Float[Array, "vertex"]) -> Float[Array, "edge"]:
        """Difference between the two vertices of each edge, over the edge length."""
        array = jnp.asarray(array)
        return (array[self.vertices_on_edge[:, 0]] - array[self.vertices_on_edge[:, 1]]) / self.dv_edge

    def calc_height_above_bed(self, thickness: Float[Array, "edge"]) -> Float[Array, "level edge"]:
        """Height of every layer center above the bed, given thickness on edges."""
        return thickness[None, :] * (1.0 - self.layer_center_sigma[:, None])
