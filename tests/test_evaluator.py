"""
Tests for the NLP Model Evaluator
"""

import numpy as np
import pytest
from nlpbridge import Feature, NLPModelEvaluator

from conftest import HS071


X = np.array([1.0, 5.0, 5.0, 1.0])


class TestFeatures:
    """Test feature negotiation."""

    def test_all_features(self, hs071_model):
        ev = NLPModelEvaluator(hs071_model)
        assert ev.features_available() == list(Feature)

    def test_initialize(self, hs071_model):
        ev = NLPModelEvaluator(hs071_model)
        ev.initialize(["Grad", Feature.HESS])
        assert ev.requested == [Feature.GRAD, Feature.HESS]

    def test_restricted_model(self):
        """Test a model without products rejects product features."""
        class NoProducts(HS071):
            features = ("Grad", "Jac", "Hess")

        ev = NLPModelEvaluator(NoProducts())
        assert Feature.JAC_VEC not in ev.features_available()
        with pytest.raises(ValueError, match="JacVec"):
            ev.initialize([Feature.GRAD, Feature.JAC_VEC])


class TestObjectiveAndConstraints:
    """Test forwarding of function and first-derivative evaluations."""

    def test_eval_f(self, hs071_model):
        ev = NLPModelEvaluator(hs071_model)
        assert ev.eval_f(X) == pytest.approx(16.0)

    def test_eval_grad_f_in_place(self, hs071_model):
        ev = NLPModelEvaluator(hs071_model)
        g = np.zeros(4)
        out = ev.eval_grad_f(g, X)
        assert out is g
        assert np.allclose(g, [12.0, 1.0, 2.0, 11.0])

    def test_eval_g_in_place(self, hs071_model):
        ev = NLPModelEvaluator(hs071_model)
        c = np.zeros(2)
        ev.eval_g(c, X)
        assert np.allclose(c, [25.0, 52.0])

    def test_jac_structure_cached(self, hs071_model):
        ev = NLPModelEvaluator(hs071_model)
        rows, cols = ev.jac_structure()
        assert ev.jac_structure()[0] is rows
        assert len(rows) == len(cols) == 8

    def test_eval_jac_g(self, hs071_model):
        ev = NLPModelEvaluator(hs071_model)
        rows, cols = ev.jac_structure()
        J = np.zeros(len(rows))
        ev.eval_jac_g(J, X)
        dense = np.zeros((2, 4))
        dense[rows, cols] = J
        assert np.allclose(dense, [[25.0, 5.0, 5.0, 25.0], [2.0, 10.0, 10.0, 2.0]])

    def test_jacobian_products(self, hs071_model):
        ev = NLPModelEvaluator(hs071_model)
        dense = hs071_model.jac(X).toarray()
        w = np.array([1.0, -1.0, 2.0, 0.5])
        y = np.zeros(2)
        ev.eval_jac_prod(y, X, w)
        assert np.allclose(y, dense @ w)

        u = np.array([0.5, 2.0])
        z = np.zeros(4)
        ev.eval_jac_prod_t(z, X, u)
        assert np.allclose(z, dense.T @ u)


class TestHessian:
    """Test forwarding of Lagrangian Hessian evaluations."""

    def test_structure_lower_triangle(self, hs071_model):
        ev = NLPModelEvaluator(hs071_model)
        rows, cols = ev.hesslag_structure()
        assert np.all(rows >= cols)
        assert ev.hesslag_structure()[1] is cols

    def test_zero_weights(self, hs071_model):
        ev = NLPModelEvaluator(hs071_model)
        H = np.ones(len(ev.hesslag_structure()[0]))
        ev.eval_hesslag(H, X, 0.0, np.zeros(2))
        assert np.allclose(H, 0.0)

    def test_objective_weight(self, hs071_model):
        """Test sigma scales the objective part only."""
        ev = NLPModelEvaluator(hs071_model)
        n = len(ev.hesslag_structure()[0])
        mu = np.array([1.0, 1.0])
        H1 = ev.eval_hesslag(np.zeros(n), X, 1.0, mu)
        H0 = ev.eval_hesslag(np.zeros(n), X, 0.0, mu)
        Hf = ev.eval_hesslag(np.zeros(n), X, 1.0, np.zeros(2))
        assert np.allclose(H1 - H0, Hf)

    def test_hessian_product(self, hs071_model):
        ev = NLPModelEvaluator(hs071_model)
        mu = np.array([0.3, -1.5])
        v = np.array([1.0, 2.0, 3.0, 4.0])
        dense = hs071_model.hess(X, mu, obj_weight=2.0).toarray()
        assert np.allclose(dense, dense.T)
        h = np.zeros(4)
        ev.eval_hesslag_prod(h, X, v, 2.0, mu)
        assert np.allclose(h, dense @ v)


class TestClassification:
    """Test linearity queries and counters."""

    def test_nonlinear_objective(self, hs071_model):
        assert not NLPModelEvaluator(hs071_model).isobjlinear()

    def test_linear_objective(self):
        ev = NLPModelEvaluator(HS071(nlo=0, lin=[1]))
        assert ev.isobjlinear()
        assert not ev.isobjquadratic()
        assert ev.isconstrlinear(1)
        assert not ev.isconstrlinear(0)

    def test_counters(self, hs071_model):
        ev = NLPModelEvaluator(hs071_model)
        ev.eval_f(X)
        ev.eval_f(X)
        ev.eval_grad_f(np.zeros(4), X)
        assert ev.counters.neval_obj == 2
        assert ev.counters.neval_grad == 1
        ev.counters.reset()
        assert ev.counters.to_dict()["neval_obj"] == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
