"""Models layered ice velocity on mesh edges using a shallow ice approximation.

The shallow ice approximation models ice as a viscous fluid following a Glen-Nye
power-law rheology, with driving stress balanced locally by basal drag. It is
most appropriate for large ice masses with small surface slopes (e.g., the
interior regions of large ice sheets). Integrating the shear strain rate from
the bed upwards gives the horizontal velocity at height z above the bed in
closed form (Cuffey and Paterson, 2010):

    u(z) = u_b + A/2 (rho g)^n |grad s|^(n-1) (-ds/dx) (H^(n+1) - (H - z)^(n+1))

Here the velocity is evaluated at the center of every layer and projected onto
the edge normal. The slope along the normal comes from the two cells on each
edge, the slope along the edge from its two vertices, and the magnitude of the
surface gradient from both. Thickness on the edge is the mean of the two cells.
There is no sliding (u_b = 0).

Cuffey, K. M., & Paterson, W. S. B. (2010). The physics of glaciers. Academic Press.
"""

import numpy as np
import jax.numpy as jnp
import equinox as eqx
from jaxtyping import Float, Array
from icebento.core import Field
from icebento.components.component import Component
from icebento.utils import (
    MeshGeometry,
    SIAConfig,
    StateSnapshot,
    ShapeMismatch,
    InvalidParameter,
    is_dynamic_ice
)

BASAL_VELOCITY = 0.0


@eqx.filter_jit
def _calc_sia_velocity(
    mesh: MeshGeometry,
    config: SIAConfig,
    thickness: Float[Array, "cell"],
    upper_surface: Float[Array, "cell"],
    upper_surface_vertex: Float[Array, "vertex"],
    edge_mask: Array
) -> Float[Array, "level edge"]:
    n = config.flow_law_exponent

    normal_slope = mesh.calc_normal_grad_at_edge(upper_surface)
    tangent_slope = mesh.calc_tangent_grad_at_edge(upper_surface_vertex)
    slope = jnp.hypot(normal_slope, tangent_slope)

    thickness_at_edges = mesh.map_mean_of_edge_cells_to_edge(thickness)
    height_above_bed = mesh.calc_height_above_bed(thickness_at_edges)

    # Flat ice does not flow, whatever the exponent
    has_slope = slope > 0
    slope_factor = jnp.power(jnp.where(has_slope, slope, 1.0), n - 1)

    flow_coeff = 0.5 * config.rate_factor * (config.ice_density * config.gravity)**n

    velocity = BASAL_VELOCITY + (
        flow_coeff
        * slope_factor[None, :]
        * normal_slope[None, :]
        * (
            jnp.power(thickness_at_edges, n + 1)[None, :]
            - jnp.power(thickness_at_edges[None, :] - height_above_bed, n + 1)
        )
    )

    is_active = is_dynamic_ice(edge_mask) & has_slope

    return jnp.where(is_active[None, :], velocity, 0.0)


class ShallowIceApproximation(Component):
    """Models layered ice velocity using a shallow ice approximation.

    Arguments:
        mesh: A MeshGeometry object.
        config: An SIAConfig with the flow law constants.

    Input fields:
        thickness: thickness of glacier ice at cells
        upper_surface: elevation of the ice surface at cells
        upper_surface_vertex: elevation of the ice surface at vertices
        edge_mask: classification mask at edges

    Output fields:
        normal_velocity: velocity normal to each edge at every layer center

    Methods:
        validate: checks the snapshot, mesh and constants before a solve
        calc_velocity: calculates the velocity of the ice
        run_one_step: returns the output fields

    The argument dt is not used for this component. Edges that are not
    flagged as dynamic ice have zero velocity at every layer. run_one_step
    does no checking so that it can be traced by jax.jit; call validate()
    on concrete inputs first.
    """

    def __init__(self, mesh, config = None):
        """Initialize the component."""
        self.input_fields = {
            'thickness': 'cell',
            'upper_surface': 'cell',
            'upper_surface_vertex': 'vertex',
            'edge_mask': 'edge'
        }

        self.output_fields = {
            'normal_velocity': 'edge'
        }

        super().__init__(mesh, config)

    def validate(self, snapshot: StateSnapshot) -> None:
        """Raise an SIAError if the inputs cannot produce a valid velocity."""
        self.config.validate()
        self._mesh.validate()
        self.check_fields(snapshot)

        for name in self.input_fields:
            if getattr(snapshot, name).value.ndim != 1:
                raise ShapeMismatch(f"Field {name} must be a 1D array.")

        expected_shape = (self._mesh.number_of_vert_levels, self._mesh.number_of_edges)
        if snapshot.normal_velocity.value.shape != expected_shape:
            raise ShapeMismatch(f"Field normal_velocity must have shape {expected_shape}.")

        edge_mask = np.asarray(snapshot.edge_mask.value)
        if not np.issubdtype(edge_mask.dtype, np.integer):
            raise InvalidParameter("Field edge_mask must hold integers.")

        # Only edges that will be computed need sensible geometry
        active = np.asarray(is_dynamic_ice(edge_mask))
        cells = np.asarray(self._mesh.cells_on_edge)[active]
        vertices = np.asarray(self._mesh.vertices_on_edge)[active]

        if np.any((cells < 0) | (cells >= self._mesh.number_of_cells)):
            raise ShapeMismatch("cells_on_edge refers to cells outside the mesh.")

        if np.any((vertices < 0) | (vertices >= self._mesh.number_of_vertices)):
            raise ShapeMismatch("vertices_on_edge refers to vertices outside the mesh.")

        for name in ['dc_edge', 'dv_edge']:
            if np.any(~(np.asarray(getattr(self._mesh, name))[active] > 0)):
                raise InvalidParameter(f"{name} must be positive on dynamic ice edges.")

        if np.any(~(np.asarray(snapshot.thickness.value)[cells] >= 0)):
            raise InvalidParameter("thickness must be non-negative next to dynamic ice edges.")

    def calc_velocity(self, snapshot: StateSnapshot) -> Float[Array, "level edge"]:
        """Calculate the velocity of the ice at every layer center on every edge."""
        return _calc_sia_velocity(
            self._mesh,
            self.config,
            snapshot.thickness.value,
            snapshot.upper_surface.value,
            snapshot.upper_surface_vertex.value,
            snapshot.edge_mask.value
        )

    def run_one_step(self, dt: float, snapshot: StateSnapshot) -> dict[str, Field]:
        """Update the ice velocity field."""
        normal_velocity = self.calc_velocity(snapshot)

        return {
            'normal_velocity': Field(normal_velocity, 'm/s', 'edge')
        }
