"""Physical parameters for the shallow ice approximation.

The defaults follow the land-ice namelist: temperate-ish ice with a rate
factor of 1e-16 Pa^-3 a^-1 expressed per second
(with a 365-day year).
"""

import math
import equinox as eqx
from icebento.utils.errors import MissingField, InvalidParameter


class SIAConfig(eqx.Module):
    """Constants for Glen's flow law, built once per run.

    Attributes:
        ice_density: density of glacier ice (kg m^-3)
        flow_law_exponent: Glen's n
        rate_factor: Glen's A (s^-1 Pa^-n)
        gravity: gravitational acceleration (m s^-2)

    Values are not checked when the config is built; call validate() (the
    solver does) to reject non-physical values.
    """

    ice_density: float = 910.0
    flow_law_exponent: float = 3.0
    rate_factor: float = 3.1709792e-24
    gravity: float = 9.81

    @classmethod
    def from_params(cls, params: dict) -> "SIAConfig":
        """Build a config from a Component-style params dictionary."""
        return cls._from_mapping(
            params,
            {
                'ice_density': 'ice_density',
                'glens_n': 'flow_law_exponent',
                'ice_flow_coefficient': 'rate_factor'
            }
        )

    @classmethod
    def from_namelist(cls, namelist: dict) -> "SIAConfig":
        """Build a config from land-ice namelist options."""
        return cls._from_mapping(
            namelist,
            {
                'config_ice_density': 'ice_density',
                'config_flowLawExponent': 'flow_law_exponent',
                'config_default_flowParamA': 'rate_factor'
            }
        )

    @classmethod
    def _from_mapping(cls, mapping: dict, names: dict[str, str]) -> "SIAConfig":
        missing = [key for key in names if key not in mapping]
        if missing:
            raise MissingField(f"Missing configuration values: {', '.join(missing)}.")

        kwargs = {attr: mapping[key] for key, attr in names.items()}
        if 'gravity' in mapping:
            kwargs['gravity'] = mapping['gravity']

        return cls(**kwargs)

    def validate(self) -> None:
        """Raise unless every parameter is a finite, positive number."""
        for name in ['ice_density', 'flow_law_exponent', 'rate_factor', 'gravity']:
            value = getattr(self, name)

            if value is None:
                raise MissingField(f"Configuration value {name} is not set.")

            try:
                value = float(value)
            except (TypeError, ValueError):
                raise InvalidParameter(f"{name} must be a number, got {value!r}.")

            if not (math.isfinite(value) and value > 0):
                raise InvalidParameter(f"{name} must be positive, got {value}.")
