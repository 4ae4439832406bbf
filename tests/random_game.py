"""Create random payoff matrices."""


from typing import Optional, Tuple

import numpy as np


def create_random_payoffs(
    num_rows: int = 3,
    num_cols: int = 3,
    low: int = -5,
    high: int = 5,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Two integer payoff matrices of equal shape; small ranges produce plenty of ties."""

    if rng is None:
        rng = np.random.default_rng()

    payoff1 = rng.integers(low=low, high=high, size=(num_rows, num_cols), endpoint=True)
    payoff2 = rng.integers(low=low, high=high, size=(num_rows, num_cols), endpoint=True)

    return payoff1, payoff2


# %% testing


if __name__ == '__main__':

    u1, u2 = create_random_payoffs()
