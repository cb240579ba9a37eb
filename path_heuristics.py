# path_heuristics.py
# Open-path ordering of measured points: nearest neighbour construction + 2-opt refinement.
# Everything here is pure computation on numpy arrays and index lists (no I/O, no plotting).

import numpy as np

METRIC_MODES = ('3d', 'xy')
CONSTRUCT_METHODS = ('nn', 'identity')
TWO_OPT_METHODS = ('delta', 'full')
TOL = 1e-9

def project(coords, mode='3d'):
    """Return the coordinate axes the metric works on: all of them ('3d') or X,Y only ('xy')."""
    coords = np.asarray(coords, dtype=float)
    if mode not in METRIC_MODES:
        raise ValueError(f"mode must be one of {METRIC_MODES}, got {mode!r}")
    if len(coords) == 0:
        return np.zeros((0, 2))
    if coords.ndim != 2:
        coords = coords.reshape(len(coords), -1)
    if mode == 'xy':
        if coords.shape[1] < 2:
            raise ValueError('xy mode needs at least two coordinate axes')
        return coords[:, :2]
    return coords

def dist(a, b, mode='3d'):
    a = np.asarray(a, dtype=float); b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        raise ValueError(f"dimensionality mismatch: {a.shape} vs {b.shape}")
    if mode == 'xy':
        a, b = a[:2], b[:2]
    elif mode not in METRIC_MODES:
        raise ValueError(f"mode must be one of {METRIC_MODES}, got {mode!r}")
    return float(np.linalg.norm(a-b))

def distance_matrix(coords, mode='3d'):
    pts = project(coords, mode)
    diffs = pts[:, np.newaxis, :] - pts[np.newaxis, :, :]
    return np.sqrt(np.sum(diffs**2, axis=-1))

def check_tour(tour, n):
    if len(tour) != n or sorted(int(t) for t in tour) != list(range(n)):
        raise ValueError(f"tour is not a permutation of range({n})")

# ---------------- Evaluation ----------------
def tour_length(D, tour):
    if len(tour) < 2:
        return 0.0
    t = np.asarray(tour, dtype=int)
    return float(np.sum(D[t[:-1], t[1:]]))

def total_distance(coords, tour, mode='3d'):
    """Length of the open path coords[tour[0]] -> ... -> coords[tour[-1]] (no closing edge)."""
    if len(tour) < 2:
        return 0.0
    pts = project(coords, mode)
    return sum(dist(pts[tour[i]], pts[tour[i+1]]) for i in range(len(tour)-1))

# ---------------- Construction ----------------
def nearest_neighbor_matrix(D, start=0):
    n = len(D)
    if n == 0:
        raise ValueError('nearest neighbour construction needs at least one point')
    # visited entries are masked with inf; argmin keeps the first (lowest index) minimum
    unv = np.ones(n, dtype=bool)
    tour = [int(start)]
    unv[start] = False
    cur = start
    while unv.any():
        row = np.where(unv, D[cur], np.inf)
        nxt = int(np.argmin(row))
        tour.append(nxt)
        unv[nxt] = False
        cur = nxt
    return tour

def nearest_neighbor(coords, mode='3d', start=0):
    return nearest_neighbor_matrix(distance_matrix(coords, mode), start=start)

# ---------------- 2-opt ----------------
def two_opt_swap(tour, i, j):
    return tour[:i] + tour[i:j+1][::-1] + tour[j+1:]

def two_opt_matrix(D, tour, max_passes=None, method='delta', tol=TOL, stats=None):
    """
    First-improvement 2-opt on an open path, in place.

    A move (i, j) with 1 <= i < j <= n-2 reverses tour[i..j]; the first and last
    positions never move. Pairs are scanned in ascending (i, j) order and a move
    is applied as soon as it shortens the path by more than `tol`; the scan then
    continues against the new length. Passes repeat until one applies nothing
    (or `max_passes` passes have run).

    method='delta' judges a move from the two removed and two added edges,
    method='full' recomputes the whole path length for every candidate.

    Returns `tour` itself. If `stats` is a dict it receives 'passes' and 'moves'.
    """
    if method not in TWO_OPT_METHODS:
        raise ValueError(f"method must be one of {TWO_OPT_METHODS}, got {method!r}")
    n = len(tour)
    check_tour(tour, len(D))
    best_len = tour_length(D, tour)
    passes = moves = 0
    improved = n >= 4
    while improved and (max_passes is None or passes < max_passes):
        improved = False; passes += 1
        for i in range(1, n-2):
            for j in range(i+1, n-1):
                if method == 'delta':
                    a, b, c, e = tour[i-1], tour[i], tour[j], tour[j+1]
                    new_len = best_len + (D[a, c] + D[b, e]) - (D[a, b] + D[c, e])
                else:
                    new_len = tour_length(D, two_opt_swap(tour, i, j))
                if new_len < best_len - tol:
                    tour[i:j+1] = tour[i:j+1][::-1]
                    best_len = tour_length(D, tour) if method == 'full' else new_len
                    improved = True; moves += 1
    if stats is not None:
        stats['passes'] = passes
        stats['moves'] = moves
    return tour

def two_opt(coords, tour, mode='3d', max_passes=None, method='delta', tol=TOL, stats=None):
    return two_opt_matrix(distance_matrix(coords, mode), tour,
                          max_passes=max_passes, method=method, tol=tol, stats=stats)

# ---------------- Pipeline ----------------
def optimize(coords, mode='3d', construct='nn', refine=True, max_passes=None, method='delta'):
    """
    Order the points so the open path through them is short.

    construct: 'nn' builds a nearest neighbour tour from index 0,
               'identity' keeps the input order as the starting tour.
    refine:    run 2-opt on the starting tour.

    Returns a dict of plain data: orders (lists of indices) and their lengths.
    """
    if construct not in CONSTRUCT_METHODS:
        raise ValueError(f"construct must be one of {CONSTRUCT_METHODS}, got {construct!r}")
    D = distance_matrix(coords, mode)
    n = len(D)
    original = list(range(n))
    original_len = tour_length(D, original)
    if construct == 'nn' and n > 0:
        order = nearest_neighbor_matrix(D)
    else:
        order = original[:]
    constructed_len = tour_length(D, order)
    stats = {'passes': 0, 'moves': 0}
    if refine:
        two_opt_matrix(D, order, max_passes=max_passes, method=method, stats=stats)
    return {
        'mode': mode, 'construct': construct, 'refine': bool(refine),
        'original_order': original,
        'order': order,
        'original_length': original_len,
        'constructed_length': constructed_len,
        'optimized_length': tour_length(D, order),
        'passes': stats['passes'], 'moves': stats['moves'],
    }
