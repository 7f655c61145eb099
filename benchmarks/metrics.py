"""Performance metrics for multi-objective optimization.

Quality of a Pareto front approximation is measured with the hypervolume
indicator from Pymoo.
"""

import numpy as np
from pymoo.indicators.hv import HV


def hypervolume(objectives: np.ndarray, ref_point: np.ndarray) -> float:
    """Compute hypervolume indicator.

    The hypervolume (or S-metric) measures the volume of objective space
    dominated by the front approximation and bounded by a reference point.
    Higher values indicate better convergence and diversity. Points beyond the
    reference point contribute nothing.

    Args:
        objectives: (n, n_obj) objective values of the front approximation.
        ref_point: Reference point, slightly worse than the problem's nadir point.

    Returns:
        Hypervolume value (higher is better for minimization problems).

    Raises:
        ValueError: If objectives array is empty or has wrong shape.
    """
    if objectives.size == 0:
        raise ValueError("objectives array cannot be empty")
    if objectives.ndim != 2:
        raise ValueError(f"objectives must be 2D array, got shape {objectives.shape}")

    return float(HV(ref_point=np.asarray(ref_point, dtype=np.float64))(objectives))
