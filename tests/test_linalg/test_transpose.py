import pytest

from helpers import *
from fylki.linalg import DenseMatrix


shapes = [(1, 1), (4, 4), (2, 5), (5, 2), (1, 7), (7, 1), (0, 3), (3, 0), (0, 0)]
shape_ids = [f"{rows}x{columns}" for rows, columns in shapes]


def test_known_values():
    m = DenseMatrix.from_array([[1, 2], [3, 4]])
    assert m.transpose().to_array().tolist() == [[1, 3], [2, 4]]


def test_non_square_layout():
    m = DenseMatrix.from_array([[1, 2, 3], [4, 5, 6]])
    t = m.transpose()
    assert t.shape == (3, 2)
    assert t.to_array().tolist() == [[1, 4], [2, 5], [3, 6]]
    assert t.buffer.tolist() == [1, 2, 3, 4, 5, 6]


@pytest.mark.parametrize("shape", shapes, ids=shape_ids)
def test_transpose(shape):
    a = get_test_array(shape)
    t = DenseMatrix.from_array(a).transpose()
    assert isinstance(t, DenseMatrix)
    assert t.shape == shape[::-1]
    assert (t.to_array() == a.T).all()


@pytest.mark.parametrize("shape", shapes, ids=shape_ids)
def test_involution(shape):
    a = get_test_array(shape)
    m = DenseMatrix.from_array(a)
    assert (m.transpose().transpose().to_array() == m.to_array()).all()


@pytest.mark.parametrize("shape", shapes, ids=shape_ids)
def test_generic_transpose(shape):
    a = get_test_array(shape)
    t = DictMatrix.from_array(a).transpose()
    assert t.shape == shape[::-1]
    assert (t.to_array() == a.T).all()


def test_conjugate_transpose():
    a = get_test_array((3, 5))
    m = DenseMatrix.from_array(a)
    assert (m.conjugate_transpose().to_array() == m.transpose().to_array()).all()
