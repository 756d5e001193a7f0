"""
Unit tests for finite-sample generation.

Tests:
- State enumeration and count
- Crystal momenta with boundary flux
- Positions and positional eigenpair assignment
- Immutability of the sample mappings
- Error handling (sample size, diagonalization)
"""

import numpy as np
import pytest

from tightbinding import (
    DiagonalizationError,
    InvalidSampleSizeError,
    ModelInput,
    SampleSettings,
    bind_parameters,
    build_model,
    create_preset,
    generate_sample,
)
from tightbinding.core.sample import generate_sample_from_settings, momentum_grid


def _on_site_model(amplitude="mu", **values):
    model_input = ModelInput(parameter_names=list(values),
                             model_name="on-site",
                             basis_vectors=[[1.0, 0.0], [0.0, 1.0]],
                             sublattice_positions=[[0.0, 0.0]],
                             atom_name_list=["A"],
                             hopping_terms=[[(0, 0, 1), (0, 0, 1), amplitude]])
    return bind_parameters(build_model(model_input), values)


@pytest.fixture
def honeycomb():
    return bind_parameters(build_model(create_preset('honeycomb')), {'t': 1.0, 'm': 0.25})


@pytest.fixture
def cubic():
    return bind_parameters(build_model(create_preset('cubic')), {'t': 1.0, 'mu': 0.1})


class TestMomentumGrid:
    """Test the crystal-momentum grid."""

    def test_grid_size_and_order(self):
        grid = momentum_grid((2, 3, 1))

        assert len(grid) == 6
        assert list(grid)[:3] == [(1, 1, 1), (1, 2, 1), (1, 3, 1)]

    def test_periodic_grid(self):
        grid = momentum_grid((4, 1, 1))
        values = [grid[(i, 1, 1)][0] for i in range(1, 5)]
        assert np.allclose(values, [0.0, np.pi / 2, np.pi, 3 * np.pi / 2])

    def test_flux_shift(self):
        grid = momentum_grid((4, 2, 1), (1, 1, 0))
        assert np.allclose(grid[(1, 1, 1)], [0.25, 0.5, 0.0])

    @pytest.mark.parametrize("size", [(0, 4, 1), (4, -1, 1), (4, 4, 0)])
    def test_non_positive_size_raises(self, size):
        with pytest.raises(InvalidSampleSizeError):
            momentum_grid(size)


class TestGenerateSample:
    """Test sample realization."""

    def test_constant_spectrum(self):
        """On-site model: every eigenvalue equals mu."""
        tb_model = _on_site_model(mu=2.0)
        sample = generate_sample(tb_model, sample_size=(3, 3, 1))

        assert np.allclose(sample.eigenvalues(), 2.0)
        assert len(sample) == 9

    def test_state_count(self, honeycomb):
        sample = generate_sample(honeycomb, sample_size=(4, 3, 1))

        assert sample.num_states == 4 * 3 * 1 * 2
        assert len(sample.state_to_r_crystal) == 24
        assert len(sample.state_to_k_crystal) == 24
        assert len(sample.state_to_eigs) == 24
        assert len(set(sample.states)) == 24

    def test_state_labels_are_one_based(self, honeycomb):
        sample = generate_sample(honeycomb, sample_size=(2, 2, 1))
        states = set(sample.states)

        assert (1, 1, 1, 1) in states
        assert (2, 2, 1, 2) in states
        assert (0, 1, 1, 1) not in states
        assert (1, 1, 1, 3) not in states

    def test_momentum_formula(self, honeycomb):
        sample = generate_sample(honeycomb, sample_size=(4, 4, 1), boundary_flux=(1, 0, 0))
        k = sample.state_to_k_crystal[(2, 1, 1, 1)]

        assert np.allclose(k, [(2 * np.pi + 1) / 4, 0.0, 0.0])

    def test_momentum_range(self, honeycomb):
        sample = generate_sample(honeycomb, sample_size=(4, 3, 1))
        momenta = sample.momenta()

        assert momenta.shape == (12, 3)
        assert np.all(momenta[:, :2] >= 0.0)
        assert np.all(momenta[:, :2] < 2 * np.pi)

    def test_2d_third_component_is_flux(self, honeycomb):
        sample = generate_sample(honeycomb, sample_size=(2, 2, 1), boundary_flux=(0, 0, 1))
        for k in sample.state_to_k_crystal.values():
            assert k[2] == pytest.approx(1.0)

    def test_sublattices_share_momentum(self, honeycomb):
        sample = generate_sample(honeycomb, sample_size=(3, 3, 1))
        for (i, j, k, sub), kvec in sample.state_to_k_crystal.items():
            assert np.array_equal(kvec, sample.state_to_k_crystal[(i, j, k, 1)])

    def test_2d_positions(self, honeycomb):
        sample = generate_sample(honeycomb, sample_size=(3, 3, 1))

        assert np.allclose(sample.state_to_r_crystal[(2, 3, 1, 1)], [2.0, 3.0])
        assert np.allclose(sample.state_to_r_crystal[(2, 3, 1, 2)], [2 + 1 / 3, 3 + 1 / 3])

    def test_3d_positions(self, cubic):
        sample = generate_sample(cubic, sample_size=(2, 2, 2))

        assert np.allclose(sample.state_to_r_crystal[(1, 2, 2, 1)], [1.0, 2.0, 2.0])

    def test_positional_eigenpairs(self, honeycomb):
        """State sub receives eigenpair sub of H(k), ascending."""
        sample = generate_sample(honeycomb, sample_size=(3, 3, 1), boundary_flux=(1, 0, 0))

        for state, (value, vector) in sample.state_to_eigs.items():
            k = sample.state_to_k_crystal[state]
            H = honeycomb.Hk_crystal(k[0], k[1])
            expected = np.linalg.eigvalsh(H)

            assert np.isclose(value, expected[state[-1] - 1])
            assert np.allclose(H @ vector, value * vector)
            assert np.isclose(np.linalg.norm(vector), 1.0)

    def test_lower_band_first(self, honeycomb):
        sample = generate_sample(honeycomb, sample_size=(3, 3, 1))
        for (i, j, k, sub), (value, _) in sample.state_to_eigs.items():
            if sub == 1:
                assert value <= sample.state_to_eigs[(i, j, k, 2)][0]

    def test_cubic_dispersion(self, cubic):
        sample = generate_sample(cubic, sample_size=(3, 2, 2), boundary_flux=(0, 1, 0))

        for state, (value, _) in sample.state_to_eigs.items():
            k = sample.state_to_k_crystal[state]
            assert np.isclose(value, 0.1 - 2 * np.sum(np.cos(k)))

    def test_temperature_is_stored(self, honeycomb):
        sample = generate_sample(honeycomb, sample_size=(1, 1, 1), temperature=0.5)
        assert sample.temperature == 0.5

    def test_default_size(self, cubic):
        sample = generate_sample(cubic)
        assert sample.sample_size == (6, 6, 6)
        assert len(sample) == 216

    def test_progress_bar(self, honeycomb):
        sample = generate_sample(honeycomb, sample_size=(2, 2, 1), progress=True)
        assert len(sample) == 8

    def test_2d_model_with_lz_warns(self, honeycomb, caplog):
        sample = generate_sample(honeycomb, sample_size=(2, 2, 2))

        assert len(sample) == 16
        assert "Lz=2" in caplog.text
        assert np.allclose(sample.state_to_r_crystal[(1, 1, 1, 1)],
                           sample.state_to_r_crystal[(1, 1, 2, 1)])

    def test_from_settings(self, honeycomb):
        settings = SampleSettings(sample_size=(2, 3, 1), boundary_flux=(0, 1, 0), temperature=0.1)
        sample = generate_sample_from_settings(honeycomb, settings)

        assert sample.sample_size == (2, 3, 1)
        assert sample.boundary_flux == (0, 1, 0)
        assert sample.temperature == 0.1
        assert len(sample) == 12

    def test_repr(self, honeycomb):
        sample = generate_sample(honeycomb, sample_size=(2, 2, 1))
        assert "states=8" in repr(sample)

    def test_size_flux_model_aliases(self, honeycomb):
        sample = generate_sample(honeycomb, sample_size=(2, 2, 1), boundary_flux=(1, 0, 0))

        assert sample.size == (2, 2, 1)
        assert sample.flux == (1, 0, 0)
        assert sample.model is honeycomb
        with pytest.raises(AttributeError):
            sample.size = (3, 3, 1)


class TestSampleErrors:
    """Test failure modes of sample generation."""

    def test_zero_size_raises(self, honeycomb):
        with pytest.raises(InvalidSampleSizeError):
            generate_sample(honeycomb, sample_size=(0, 4, 1))

    def test_size_length_raises(self, honeycomb):
        with pytest.raises(ValueError, match="3 entries"):
            generate_sample(honeycomb, sample_size=(4, 4))

    def test_fractional_flux_raises(self, honeycomb):
        with pytest.raises(ValueError, match="must contain integers"):
            generate_sample(honeycomb, sample_size=(4, 1, 1), boundary_flux=(0.5, 0, 0))

    def test_fractional_size_raises(self, honeycomb):
        with pytest.raises(ValueError, match="must contain integers"):
            generate_sample(honeycomb, sample_size=(2.9, 1, 1))

    def test_complex_diagonal_raises(self):
        """An imaginary on-site energy makes the matrix non-Hermitian."""
        tb_model = _on_site_model("I*g", g=1.0)
        with pytest.raises(DiagonalizationError):
            generate_sample(tb_model, sample_size=(2, 2, 1))


class TestSampleImmutability:
    """Test that a generated sample cannot be modified."""

    def setup_method(self):
        tb_model = _on_site_model(mu=1.0)
        self.sample = generate_sample(tb_model, sample_size=(2, 2, 1))

    def test_mappings_are_read_only(self):
        with pytest.raises(TypeError):
            self.sample.state_to_eigs[(1, 1, 1, 1)] = (0.0, np.zeros(1))
        with pytest.raises(TypeError):
            self.sample.state_to_k_crystal[(9, 9, 9, 1)] = np.zeros(3)

    def test_arrays_are_read_only(self):
        with pytest.raises(ValueError):
            self.sample.state_to_k_crystal[(1, 1, 1, 1)][0] = 1.0
        with pytest.raises(ValueError):
            self.sample.state_to_r_crystal[(1, 1, 1, 1)][0] = 1.0
        with pytest.raises(ValueError):
            self.sample.state_to_eigs[(1, 1, 1, 1)][1][0] = 1.0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
