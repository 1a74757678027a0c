from .boxing import (
    data_boxing,
    box_layout,
    autoprismdim,
)
from .neighbors import (
    chebyshev_distance,
    boxes_adjacent,
    find_neighborboxes_2,
    find_neighborboxes_q,
)
from .counting import (
    inner_correlationsum_2,
    inner_correlationsum_q,
    boxed_correlationsum_2,
    boxed_correlationsum_q,
)
from .boxsize import (
    estimate_r0_theiler,
    estimate_r0_buenoorovio,
)
from .correlationsum import (
    correlationsum,
    minimum_pairwise_distance,
)
from .scaling import (
    get_pairwise_slopes,
    linear_regions,
    linear_region,
)
from .datasets import (
    minmaxima,
    random_subsample,
    lorenz_trajectory,
)

from .core import (
    boxed_correlationsum,
    boxed_correlation_dimension,
)

__version__ = '0.1.0'
__author__ = 'DillyDilly'

__all__ = [
    # Core functionality
    'boxed_correlationsum',
    'boxed_correlation_dimension',
    'autoprismdim',
    'data_boxing',
    'box_layout',
    'estimate_r0_theiler',
    'estimate_r0_buenoorovio',

    # Boxed counting
    'chebyshev_distance',
    'boxes_adjacent',
    'find_neighborboxes_2',
    'find_neighborboxes_q',
    'inner_correlationsum_2',
    'inner_correlationsum_q',
    'boxed_correlationsum_2',
    'boxed_correlationsum_q',

    # Reference sums and scaling fits
    'correlationsum',
    'minimum_pairwise_distance',
    'get_pairwise_slopes',
    'linear_regions',
    'linear_region',

    # Data
    'minmaxima',
    'random_subsample',
    'lorenz_trajectory',
]
