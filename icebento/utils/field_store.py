"""Time-levelled state fields shared between solvers.

A FieldStore holds a small, fixed number of StateSnapshots, one per time
level. Snapshots are immutable: updating a field returns a new store that
shares every other array with the old one.
"""

import dataclasses
from typing import Optional
import jax.numpy as jnp
import equinox as eqx
from icebento.core import Field
from icebento.utils.errors import MissingField


class StateSnapshot(eqx.Module):
    """The fields of the ice state at one time level.

    Attributes:
        thickness: ice thickness at cells
        upper_surface: elevation of the ice surface at cells
        upper_surface_vertex: elevation of the ice surface at vertices
        edge_mask: integer classification mask at edges
        normal_velocity: normal velocity at edges, one row per layer
    """

    thickness: Optional[Field] = None
    upper_surface: Optional[Field] = None
    upper_surface_vertex: Optional[Field] = None
    edge_mask: Optional[Field] = None
    normal_velocity: Optional[Field] = None


class FieldStore(eqx.Module):
    """A fixed-size collection of StateSnapshots indexed by time level.

    Methods:
        allocate: build a store of zeroed snapshots for a mesh.
        get: return the snapshot at a time level.
        update: replace fields in the snapshot at a time level.
        with_normal_velocity: replace the velocity at a time level.
    """

    snapshots: tuple[StateSnapshot, ...] = eqx.field(converter = tuple)

    @classmethod
    def allocate(cls, mesh, number_of_time_levels: int = 2) -> "FieldStore":
        """Allocate zeroed fields on every time level."""
        def empty_snapshot():
            return StateSnapshot(
                thickness = Field(jnp.zeros(mesh.number_of_cells), 'm', 'cell'),
                upper_surface = Field(jnp.zeros(mesh.number_of_cells), 'm', 'cell'),
                upper_surface_vertex = Field(jnp.zeros(mesh.number_of_vertices), 'm', 'vertex'),
                edge_mask = Field(jnp.zeros(mesh.number_of_edges, dtype = int), '', 'edge'),
                normal_velocity = Field(
                    jnp.zeros((mesh.number_of_vert_levels, mesh.number_of_edges)), 'm/s', 'edge'
                )
            )

        return cls([empty_snapshot() for _ in range(number_of_time_levels)])

    @property
    def number_of_time_levels(self) -> int:
        return len(self.snapshots)

    def get(self, time_level: int) -> StateSnapshot:
        """Return the snapshot at a time level."""
        if isinstance(time_level, bool) or not isinstance(time_level, int):
            raise MissingField(f"Time level must be an integer, got {time_level!r}.")

        if not 0 <= time_level < self.number_of_time_levels:
            raise MissingField(
                f"Time level {time_level} is not allocated "
                f"(store has {self.number_of_time_levels} levels)."
            )

        return self.snapshots[time_level]

    def update(self, time_level: int, **fields: Optional[Field]) -> "FieldStore":
        """Return a new store with some fields replaced at one time level."""
        snapshot = dataclasses.replace(self.get(time_level), **fields)

        return FieldStore(
            self.snapshots[:time_level] + (snapshot,) + self.snapshots[time_level + 1:]
        )

    def with_normal_velocity(self, time_level: int, velocity) -> "FieldStore":
        """Return a new store where only the velocity at one time level has changed."""
        if self.get(time_level).normal_velocity is None:
            raise MissingField(f"normal_velocity is not allocated at time level {time_level}.")

        return eqx.tree_at(
            lambda store: store.snapshots[time_level].normal_velocity.value,
            self,
            jnp.asarray(velocity)
        )
