"""
This example illustrates how to:
- fill a dense matrix with random numbers from a seeded distribution;
- construct a reduction with a custom predicate that works on tuples
  (here, a minmax over the elements of the matrix buffer);
- run the same computation on one thread and on a worker pool.
"""

import numpy

from fylki import DenseMatrix, control
from fylki.distributions import DiscreteUniform
from fylki.parallel import Predicate, Reduce


# Create the "empty" element for our minmax monoid, that is
# x `minmax` empty == empty `minmax` x == x.
empty = (1 << 30, -(1 << 30))


def minmax(v1, v2):
    return (min(v1[0], v2[0]), max(v1[1], v2[1]))


predicate = Predicate(minmax, empty)


m = DenseMatrix.random(200, 100, DiscreteUniform(0, 10**6, seed=42))
data = m.buffer

for threads in (1, 4):
    with control.override(max_degree_of_parallelism=threads):
        rd = Reduce(0, data.size, predicate)
        cur_min, cur_max = rd(lambda i: (data[i], data[i]))

    assert cur_min == data.min()
    assert cur_max == data.max()
    print(f"{threads} thread(s): min={cur_min:.0f}, max={cur_max:.0f}")

print("Frobenius norm:", m.frobenius_norm(), "(numpy:", numpy.linalg.norm(m.to_array()), ")")
