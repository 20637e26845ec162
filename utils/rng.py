from __future__ import annotations

import random
import numpy as np


def make_rng(seed: int) -> np.random.Generator:
    """Seed the global generators and return a dedicated one for the driver."""
    random.seed(seed)
    np.random.seed(seed)
    return np.random.default_rng(seed)
