"""Tests for shear-building assembly and modal analysis."""
import numpy as np
import pytest

from tmd_sim.errors import InputRangeError, NumericalError
from tmd_sim.models.mdof import floor_stiffness, modal_analysis, shear_building


class TestShearBuilding:
    def test_three_floor_closed_form(self):
        """Uniform 3-floor chain reduces to k*[[2,-1,0],[-1,2,-1],[0,-1,1]]."""
        M, K = shear_building(3, 1.0, 1000.0)
        expected = 1000.0 * np.array([[2, -1, 0], [-1, 2, -1], [0, -1, 1]], dtype=float)
        np.testing.assert_array_equal(K, expected)
        np.testing.assert_array_equal(M, np.eye(3))

    def test_general_chain_per_floor_stiffness(self):
        """K[i,i] = k_i + k_{i+1}, K[i,i+1] = -k_{i+1}."""
        k = [300.0, 200.0, 100.0, 50.0]
        _, K = shear_building(4, [1.0, 2.0, 3.0, 4.0], k)
        np.testing.assert_allclose(np.diag(K), [500.0, 300.0, 150.0, 50.0])
        np.testing.assert_allclose(np.diag(K, 1), [-200.0, -100.0, -50.0])
        np.testing.assert_allclose(K, K.T)

    def test_single_floor(self):
        M, K = shear_building(1, 2.0, 50.0)
        assert M.shape == (1, 1)
        assert K[0, 0] == pytest.approx(50.0)

    def test_zero_floors_rejected(self):
        with pytest.raises(InputRangeError):
            shear_building(0, 1.0, 1.0)

    def test_mass_length_mismatch(self):
        with pytest.raises(InputRangeError):
            shear_building(3, [1.0, 1.0], 1.0)

    def test_floor_stiffness_from_geometry(self):
        """Two fixed-fixed columns: 24 E I / L^3 with I = b t^3 / 12."""
        k = floor_stiffness(0.2, 0.001, 0.08, 2.1e11)
        I = 0.08 * 0.001**3 / 12.0
        assert k == pytest.approx(24.0 * 2.1e11 * I / 0.2**3)
        assert k == pytest.approx(4200.0)


class TestModalAnalysis:
    def test_three_floor_frequencies(self):
        """Fixed-free chain: lambda_j = 4 k sin^2((2j-1) pi / 14)."""
        M, K = shear_building(3, 1.0, 1000.0)
        f, w, phi = modal_analysis(M, K)
        j = np.arange(1, 4)
        lam = 4.0 * 1000.0 * np.sin((2*j - 1) * np.pi / 14.0)**2
        np.testing.assert_allclose(w, np.sqrt(lam), rtol=1e-10)
        np.testing.assert_allclose(f, np.sqrt(lam) / (2*np.pi), rtol=1e-10)
        np.testing.assert_allclose(np.sort(w**2), np.linalg.eigvalsh(K), rtol=1e-10)

    def test_sorted_and_residual(self):
        """Mode i satisfies K v = lambda M v and frequencies are ascending."""
        M, K = shear_building(5, [1.0, 1.2, 0.8, 1.5, 0.7], [900.0, 800.0, 1200.0, 600.0, 700.0])
        f, w, phi = modal_analysis(M, K)
        assert np.all(f >= 0)
        assert np.all(np.diff(f) >= 0)
        for i in range(len(w)):
            v = phi[:, i]
            r = K @ v - w[i]**2 * (M @ v)
            assert np.linalg.norm(r) < 1e-8 * np.linalg.norm(K @ v)

    def test_negative_eigenvalue_rejected(self):
        with pytest.raises(NumericalError):
            modal_analysis(np.eye(2), np.array([[-5.0, 0.0], [0.0, 1.0]]))

    def test_asymmetric_stiffness_rejected(self):
        """trace 3, det 7: the true eigenvalues are complex."""
        with pytest.raises(NumericalError, match="symmetric"):
            modal_analysis(np.eye(2), np.array([[2.0, 5.0], [-1.0, 1.0]]))

    def test_asymmetric_mass_rejected(self):
        with pytest.raises(NumericalError, match="M must be"):
            modal_analysis(np.array([[1.0, 0.3], [0.0, 1.0]]), np.eye(2))

    def test_indefinite_mass_rejected(self):
        with pytest.raises(NumericalError):
            modal_analysis(np.array([[-1.0]]), np.array([[1.0]]))

    def test_free_body_mode_clipped_to_zero(self):
        """A rigid-body mode gives f = 0, not NaN."""
        K = np.array([[1.0, -1.0], [-1.0, 1.0]])
        f, w, _ = modal_analysis(np.eye(2), K)
        assert f[0] == pytest.approx(0.0, abs=1e-7)
        assert w[1] == pytest.approx(np.sqrt(2.0))
