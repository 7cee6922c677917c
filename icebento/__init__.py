"""IceBento: ice velocity on unstructured Voronoi meshes.

Velocities are computed in double precision, so 64-bit floats are switched
on for JAX before any arrays are created.
"""

import jax

jax.config.update("jax_enable_x64", True)

from icebento.core import Field, LOCATIONS
from icebento.components import Component, ShallowIceApproximation
from icebento.sia import init, block_init, solve, finalize, SolveResult

__version__ = "0.1.0"

__all__ = [
    "Field",
    "LOCATIONS",
    "Component",
    "ShallowIceApproximation",
    "init",
    "block_init",
    "solve",
    "finalize",
    "SolveResult"
]
