"""Derived physical constants."""


def correct_parameters(Re: float, lid_velocity: float = 1.0, length: float = 1.0) -> float:
    """Kinematic viscosity for a given Reynolds number.

    ``nu = U * L / Re``. An infinite Reynolds number gives ``nu = 0``, which
    the solver does not guard against: the first momentum sweep then divides
    by a zero central coefficient and the run reports divergence.

    Parameters
    ----------
    Re : float
        Reynolds number based on lid velocity and cavity length.
    lid_velocity : float
        Lid speed U.
    length : float
        Cavity side length L.

    Returns
    -------
    float
        Kinematic viscosity nu.
    """
    if Re <= 0:
        raise ValueError(f"Reynolds number must be positive, got {Re}")
    return lid_velocity * length / Re
