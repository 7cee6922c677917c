from .component import Component
from .shallow_ice_approximation import ShallowIceApproximation

__all__ = [
    'Component',
    'ShallowIceApproximation'
]
