"""K-means clustering for member segmentation"""

import math
import random
from dataclasses import replace
from typing import List, Sequence

from meraki_intelligence.domain.models import ClusterPoint


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


def k_means_clustering(
    points: Sequence[ClusterPoint],
    k: int = 3,
    max_iterations: int = 100,
    seed: int | None = None,
) -> List[ClusterPoint]:
    """
    Lloyd's algorithm with Euclidean distance.

    - Initial centroids are k random points, preferring distinct feature vectors
    - Stops when no assignment changes or after `max_iterations` rounds
    - Empty clusters keep their previous centroid
    - Returns new ClusterPoints with `cluster` set; the input is left untouched

    With fewer points than k, the points are returned unassigned.
    """
    if k <= 0 or len(points) < k:
        return list(points)

    rng = random.Random(seed)
    dimensions = len(points[0].features)

    distinct = list({tuple(p.features): p for p in points}.values())
    pool = distinct if len(distinct) >= k else list(points)
    centroids = [list(p.features) for p in rng.sample(pool, k)]

    assignments: List[int | None] = [None] * len(points)
    iterations = 0
    changed = True

    while changed and iterations < max_iterations:
        changed = False
        iterations += 1

        for idx, point in enumerate(points):
            nearest = min(range(k), key=lambda c: euclidean_distance(point.features, centroids[c]))
            if assignments[idx] != nearest:
                assignments[idx] = nearest
                changed = True

        sums = [[0.0] * dimensions for _ in range(k)]
        counts = [0] * k
        for point, cluster in zip(points, assignments):
            counts[cluster] += 1
            for d in range(dimensions):
                sums[cluster][d] += point.features[d]

        for c in range(k):
            if counts[c] > 0:
                centroids[c] = [total / counts[c] for total in sums[c]]

    return [replace(point, cluster=cluster) for point, cluster in zip(points, assignments)]

