"""
Tests for the simulated annealer.
"""

import random
import threading

import pytest

from lunch_grouper.core.errors import InvalidInputError
from lunch_grouper.core.schemas.validator import ValidationError
from lunch_grouper.optimizer.annealer import Annealer, run_annealing, temperature_steps
from lunch_grouper.optimizer.config import AnnealingParams, OptimizerConfig
from lunch_grouper.optimizer.cost import partition_cost
from lunch_grouper.optimizer.grouping import initial_partition, valid_coverage, valid_sizes


def _block_ledger(blocks):
    """Every pair inside each block has met once."""
    ledger = {}
    for block in blocks:
        for i, a in enumerate(block):
            for b in block[i + 1:]:
                ledger[f"{min(a, b)}-{max(a, b)}"] = 1
    return ledger


class TestTemperatureSteps:
    """Tests for the cooling step count."""

    def test_temperature_steps_when_defaults_then_about_2297(self):
        assert 2296 <= temperature_steps(AnnealingParams()) <= 2298

    def test_temperature_steps_when_fast_schedule_then_44(self, fast_params):
        assert temperature_steps(fast_params) == 44


class TestRunAnnealing:
    """Tests for run_annealing()."""

    def test_run_when_same_seed_then_same_result(self, fast_config, repeat_ledger, eight_members):
        """Seeded runs are reproducible."""
        first = run_annealing(eight_members, repeat_ledger, fast_config)
        second = run_annealing(eight_members, repeat_ledger, fast_config)

        assert first.partition == second.partition
        assert first.cost == second.cost

    def test_run_when_finished_then_partition_covers_members_in_window(self, fast_config):
        # Arrange
        members = list(range(1, 24))
        ledger = _block_ledger([members[i:i + 4] for i in range(0, 23, 4)])

        # Act
        result = run_annealing(members, ledger, fast_config)

        # Assert
        assert valid_sizes(result.partition)
        assert valid_coverage(result.partition, members)
        assert result.cost == partition_cost(result.partition, ledger)

    def test_run_when_finished_then_best_not_worse_than_initial(self, fast_config, repeat_ledger, eight_members):
        """The annealer consumes the generator for the initial partition first."""
        initial = initial_partition(eight_members, 4, random.Random(11))
        initial_cost = partition_cost(initial, repeat_ledger)

        result = run_annealing(eight_members, repeat_ledger, fast_config, rng=random.Random(11))

        assert result.cost <= initial_cost

    def test_run_when_historical_groups_then_mixes_them(self, fast_config, repeat_ledger, eight_members):
        """Two groups of 4 from two blocks of 4 cannot beat 2 + 2 per group."""
        result = run_annealing(eight_members, repeat_ledger, fast_config)
        assert result.cost == 12

    def test_run_when_transversal_exists_then_finds_zero_cost(self):
        # Arrange
        blocks = [(1, 2, 3), (4, 5, 6), (7, 8, 9)]
        config = OptimizerConfig(
            params=AnnealingParams(
                initial_temperature=100.0,
                cooling_rate=0.95,
                min_temperature=0.01,
                iterations_per_temperature=50,
            ),
            target_size=3,
            seed=5,
        )

        # Act
        result = run_annealing(list(range(1, 10)), _block_ledger(blocks), config)

        # Assert
        assert result.cost == 0
        for group in result.partition:
            assert len({(member - 1) // 3 for member in group}) == 3

    def test_run_when_empty_ledger_then_zero_cost(self, fast_config):
        result = run_annealing(list(range(1, 18)), {}, fast_config)
        assert result.cost == 0

    def test_run_when_three_members_then_single_group(self, fast_config):
        """A single group leaves every proposal a no-op."""
        result = run_annealing([4, 8, 15], {"4-8": 2}, fast_config)

        assert [sorted(g) for g in result.partition] == [[4, 8, 15]]
        assert result.cost == 2
        assert result.stats.no_ops == result.stats.iterations

    def test_run_when_fewer_than_three_members_then_raises(self, fast_config):
        with pytest.raises(InvalidInputError):
            run_annealing([1, 2], {}, fast_config)

    def test_run_when_one_iteration_per_step_then_bounded_by_schedule(self):
        """Iterations never exceed temperature_steps * iterations_per_temperature."""
        params = AnnealingParams(iterations_per_temperature=1)
        config = OptimizerConfig(params=params, seed=3)

        result = run_annealing(list(range(1, 13)), {}, config)

        assert result.stats.iterations == temperature_steps(params)
        assert result.stats.temperature_steps == temperature_steps(params)
        assert not result.stats.cancelled

    def test_run_when_completed_then_stats_consistent(self, fast_config, repeat_ledger, eight_members):
        stats = run_annealing(eight_members, repeat_ledger, fast_config).stats

        assert stats.iterations == 44 * 20
        assert stats.accepted + stats.rejected_invalid + stats.no_ops <= stats.iterations
        assert stats.improved <= stats.accepted
        assert stats.seed == 1234


class TestProgressAndCancellation:
    """Tests for the progress observer and cooperative cancellation."""

    def test_progress_when_cadence_matches_step_then_called_each_step(self, fast_params, eight_members):
        # Arrange
        snapshots = []
        config = OptimizerConfig(params=fast_params, seed=9, progress_every=20)

        # Act
        result = run_annealing(eight_members, {}, config, progress=snapshots.append)

        # Assert
        assert len(snapshots) == result.stats.temperature_steps
        assert all(s.iteration % 20 == 0 for s in snapshots)
        assert all(s.best_cost <= s.current_cost for s in snapshots)
        temperatures = [s.temperature for s in snapshots]
        assert temperatures == sorted(temperatures, reverse=True)

    def test_progress_when_default_cadence_then_every_hundred_iterations(self, fast_config, eight_members):
        snapshots = []

        run_annealing(eight_members, {}, fast_config, progress=snapshots.append)

        # 20 proposals per step: reported after every 5th step
        assert [s.iteration for s in snapshots] == list(range(100, 881, 100))

    def test_cancel_when_set_before_start_then_initial_partition_returned(
        self, fast_config, repeat_ledger, eight_members
    ):
        # Arrange
        cancel = threading.Event()
        cancel.set()

        # Act
        result = run_annealing(eight_members, repeat_ledger, fast_config, cancel_event=cancel)

        # Assert
        assert result.stats.cancelled
        assert result.stats.iterations == 0
        assert valid_coverage(result.partition, eight_members)
        assert valid_sizes(result.partition)

    def test_cancel_when_set_from_progress_then_stops_early(self, fast_config, eight_members):
        cancel = threading.Event()

        def _stop(snapshot):
            cancel.set()

        result = run_annealing(eight_members, {}, fast_config, progress=_stop, cancel_event=cancel)

        assert result.stats.cancelled
        assert result.stats.iterations == 100

    def test_annealer_when_no_rng_then_seeded_from_config(self, fast_config, eight_members, repeat_ledger):
        annealer = Annealer(eight_members, repeat_ledger, fast_config)

        result = annealer.run()

        assert annealer.seed == 1234
        assert result == run_annealing(eight_members, repeat_ledger, fast_config, rng=random.Random(1234))


class TestRunAnnealingInputs:
    """Tests for member id checks at the start of a run."""

    def test_run_when_duplicate_ids_then_raises_validation_error(self, fast_config):
        with pytest.raises(ValidationError, match="distinct"):
            run_annealing([5, 5, 6, 7, 8, 9], {}, fast_config)

    def test_run_when_non_positive_ids_then_raises(self, fast_config):
        with pytest.raises(InvalidInputError, match="positive integers"):
            Annealer([0, -1, 2, 3], {}, fast_config).run()


class TestBestCostTracking:
    """Tests for the best cost reported during a run."""

    def test_progress_when_run_then_best_cost_never_increases(self, fast_params):
        # Arrange
        members = list(range(1, 21))
        ledger = _block_ledger([members[i:i + 4] for i in range(0, 20, 4)])
        snapshots = []
        config = OptimizerConfig(params=fast_params, seed=17, progress_every=20)

        # Act
        result = run_annealing(members, ledger, config, progress=snapshots.append)

        # Assert
        best_costs = [s.best_cost for s in snapshots]
        assert len(best_costs) == 44
        assert all(later <= earlier for earlier, later in zip(best_costs, best_costs[1:]))
        assert result.cost == best_costs[-1]
