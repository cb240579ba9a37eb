import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest


@pytest.fixture
def square():
    # A=(0,0) B=(10,0) C=(10,10) D=(0,10): already the shortest open path
    return np.array([[0, 0], [10, 0], [10, 10], [0, 10]], dtype=float)


@pytest.fixture
def crossing():
    # P0=(0,0) P2=(10,10) P1=(0,10) P3=(10,0): the input order crosses itself
    return np.array([[0, 0], [10, 10], [0, 10], [10, 0]], dtype=float)
