"""
Tests for NLP Model Metadata
"""

import numpy as np
import pytest
from nlpbridge import NLPModelMeta


class TestMetaDefaults:
    """Test default values of the metadata record."""

    def test_vectors(self):
        meta = NLPModelMeta(nvar=3, ncon=2)
        assert np.array_equal(meta.x0, np.zeros(3))
        assert np.array_equal(meta.y0, np.zeros(2))
        assert np.all(meta.lvar == -np.inf)
        assert np.all(meta.uvar == np.inf)
        assert np.all(meta.lcon == -np.inf)
        assert np.all(meta.ucon == np.inf)

    def test_category_counts(self):
        """Test all variables default to nonlinear continuous."""
        meta = NLPModelMeta(nvar=4)
        assert (meta.nlvb, meta.nlvc, meta.nlvo) == (4, 4, 4)
        assert (meta.nlvbi, meta.nlvci, meta.nlvoi) == (0, 0, 0)
        assert (meta.nwv, meta.nbv, meta.niv) == (0, 0, 0)

    def test_sense_and_linearity(self):
        meta = NLPModelMeta(nvar=1)
        assert meta.minimize
        assert meta.nlo == 1
        assert meta.lin == []

    def test_coercion(self):
        meta = NLPModelMeta(nvar=2, x0=[1, 2], lin=[1, 0], ncon=2)
        assert meta.x0.dtype == np.float64
        assert meta.lin == [0, 1]


class TestMetaValidation:
    """Test invalid metadata is rejected."""

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="x0"):
            NLPModelMeta(nvar=3, x0=[1.0, 2.0])

    def test_constraint_bound_mismatch(self):
        with pytest.raises(ValueError, match="lcon"):
            NLPModelMeta(nvar=1, ncon=2, lcon=[0.0])

    def test_negative_size(self):
        with pytest.raises(ValueError):
            NLPModelMeta(nvar=-1)


class TestMetaIndexSets:
    """Test bound classification index lists."""

    def test_variable_bounds(self):
        meta = NLPModelMeta(
            nvar=5,
            lvar=[0.0, 0.0, -np.inf, 1.0, -np.inf],
            uvar=[0.0, np.inf, 3.0, 2.0, np.inf],
        )
        assert meta.ifix == [0]
        assert meta.ilow == [1]
        assert meta.iupp == [2]
        assert meta.irng == [3]
        assert meta.ifree == [4]

    def test_constraint_bounds(self):
        meta = NLPModelMeta(
            nvar=1, ncon=3,
            lcon=[25.0, 40.0, -np.inf],
            ucon=[np.inf, 40.0, np.inf],
            lin=[2],
        )
        assert meta.jlow == [0]
        assert meta.jfix == [1]
        assert meta.jfree == [2]
        assert meta.nln == [0, 1]

    def test_to_canonical(self):
        meta = NLPModelMeta(nvar=2, nbv=0, name="demo")
        data = meta.to_canonical()
        assert data["name"] == "demo"
        assert data["counts"]["nlvo"] == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
