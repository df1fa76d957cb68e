"""
Tests for the generation step: pairing, offspring creation, scoring and selection.
"""

import unittest
from functools import partial

import numpy as np

from ga_core.crossover import is_permutation, pmx_crossover, uniform_swap_crossover
from ga_core.data_models import Individual, Population
from ga_core.generation import (
    evaluate_genome,
    evaluate_genomes,
    make_offspring,
    pair_parents,
    run_generation,
    truncation_select,
)
from ga_core.mutation import bounded_perturbation, point_swap
from ga_core.validation import FitnessEvaluationError


def sum_of_squares(x):
    return float(np.sum(np.asarray(x, dtype=float) ** 2))


def displacement(tour):
    return float(np.sum(np.abs(tour - np.arange(len(tour)))))


class TestPairing(unittest.TestCase):
    """Test parent pairing."""

    def test_pairs_cover_population(self):
        """Test every parent index appears in exactly one pair."""
        rng = np.random.default_rng(42)
        pairs = pair_parents(10, rng)

        self.assertEqual(pairs.shape, (5, 2))
        np.testing.assert_array_equal(np.sort(pairs.ravel()), np.arange(10))


class TestEvaluation(unittest.TestCase):
    """Test fitness evaluation and its failure modes."""

    def test_objective_exception_is_wrapped(self):
        """Test objective errors become FitnessEvaluationError with the cause attached."""
        def failing(genome):
            raise ValueError("bad genome")

        with self.assertRaises(FitnessEvaluationError) as ctx:
            evaluate_genome(failing, np.array([1.0, 2.0]))

        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    def test_nan_is_rejected(self):
        """Test a NaN score aborts evaluation."""
        with self.assertRaises(FitnessEvaluationError):
            evaluate_genome(lambda g: float('nan'), np.array([0.0]))

    def test_workers_keep_order(self):
        """Test threaded evaluation returns scores aligned with genomes."""
        genomes = [np.array([float(k)]) for k in range(20)]

        sequential = evaluate_genomes(sum_of_squares, genomes, n_workers=1)
        threaded = evaluate_genomes(sum_of_squares, genomes, n_workers=4)

        self.assertEqual([ind.score for ind in sequential], [ind.score for ind in threaded])
        self.assertEqual(threaded[3].score, 9.0)

    def test_workers_propagate_errors(self):
        """Test threaded evaluation still raises FitnessEvaluationError."""
        genomes = [np.array([1.0]), np.array([-1.0])]

        def positive_only(g):
            if g[0] < 0:
                raise ArithmeticError("negative")
            return float(g[0])

        with self.assertRaises(FitnessEvaluationError):
            evaluate_genomes(positive_only, genomes, n_workers=2)


class TestOffspring(unittest.TestCase):
    """Test offspring creation."""

    def setUp(self):
        """Set up a small permutation population."""
        rng = np.random.default_rng(42)
        self.population = Population([
            Individual(genome=rng.permutation(8), score=0.0) for _ in range(10)
        ])

    def test_one_child_per_parent(self):
        """Test offspring count equals population size."""
        rng = np.random.default_rng(1)
        offspring, op_log = make_offspring(self.population, 0.5, pmx_crossover, point_swap, rng)

        self.assertEqual(len(offspring), 10)
        self.assertEqual(len(op_log), 5)
        for child in offspring:
            self.assertTrue(is_permutation(child))

    def test_rate_extremes(self):
        """Test rate 1 always crosses over and rate 0 always mutates."""
        rng = np.random.default_rng(1)

        _, always = make_offspring(self.population, 1.0, pmx_crossover, point_swap, rng)
        _, never = make_offspring(self.population, 0.0, pmx_crossover, point_swap, rng)

        self.assertEqual(set(always), {"crossover"})
        self.assertEqual(set(never), {"mutation"})


class TestTruncationSelect(unittest.TestCase):
    """Test truncation selection."""

    def test_keeps_lowest_scores_in_order(self):
        """Test the lowest scores are kept in ascending order."""
        pool = [Individual(genome=np.array([k]), score=s)
                for k, s in enumerate([5.0, 1.0, 3.0, 2.0, 4.0, 0.0])]

        kept = truncation_select(pool, 3, np.random.default_rng(42))

        self.assertEqual([ind.score for ind in kept], [0.0, 1.0, 2.0])

    def test_ties_broken_randomly(self):
        """Test equal scores are not resolved by pool position."""
        pool = [Individual(genome=np.array([k]), score=1.0) for k in range(6)]

        chosen = set()
        for seed in range(20):
            kept = truncation_select(pool, 2, np.random.default_rng(seed))
            chosen.add(tuple(int(ind.genome[0]) for ind in kept))

        self.assertGreater(len(chosen), 1)


class TestRunGeneration(unittest.TestCase):
    """Test a complete generation step."""

    def setUp(self):
        """Set up continuous and permutation populations."""
        rng = np.random.default_rng(42)
        self.bounds = np.array([[-3.0, 3.0]] * 3)
        self.mutate = partial(self._perturb, bounds=self.bounds)

        self.vectors = Population(evaluate_genomes(
            sum_of_squares, [rng.uniform(-3.0, 3.0, size=3) for _ in range(12)]
        ))
        self.tours = Population(evaluate_genomes(
            displacement, [rng.permutation(7) for _ in range(12)]
        ))

    @staticmethod
    def _perturb(genome, rng, bounds):
        return bounded_perturbation(genome, bounds, 0.2, rng)

    def test_size_and_ranking(self):
        """Test population size is preserved and scores are ranked."""
        rng = np.random.default_rng(3)
        population, record = run_generation(
            self.vectors, sum_of_squares, 0.7, uniform_swap_crossover, self.mutate, rng,
            generation=1
        )

        self.assertEqual(len(population), 12)
        self.assertEqual(record.generation, 1)
        self.assertTrue(np.all(np.diff(record.scores) >= 0))
        self.assertEqual(record.elite.score, record.scores[0])

    def test_best_never_worsens(self):
        """Test the best score is non-increasing over generations."""
        rng = np.random.default_rng(3)
        population = self.tours
        previous = population.best().score

        for g in range(20):
            population, record = run_generation(
                population, displacement, 0.7, pmx_crossover, point_swap, rng, generation=g + 1
            )
            self.assertLessEqual(record.best, previous)
            previous = record.best

    def test_permutations_preserved(self):
        """Test all retained tours stay valid permutations."""
        rng = np.random.default_rng(5)
        population = self.tours

        for g in range(10):
            population, _ = run_generation(
                population, displacement, 0.5, pmx_crossover, point_swap, rng
            )

        for ind in population:
            self.assertTrue(is_permutation(ind.genome))

    def test_elite_is_independent_copy(self):
        """Test editing the recorded elite does not change the population."""
        rng = np.random.default_rng(3)
        population, record = run_generation(
            self.vectors, sum_of_squares, 0.7, uniform_swap_crossover, self.mutate, rng
        )

        record.elite.genome[:] = 99.0
        self.assertFalse(np.any(population[0].genome == 99.0))

    def test_workers_do_not_change_results(self):
        """Test threaded scoring gives the same generation as sequential scoring."""
        _, sequential = run_generation(
            self.tours, displacement, 0.7, pmx_crossover, point_swap,
            np.random.default_rng(11), n_workers=1
        )
        _, threaded = run_generation(
            self.tours, displacement, 0.7, pmx_crossover, point_swap,
            np.random.default_rng(11), n_workers=3
        )

        np.testing.assert_array_equal(sequential.scores, threaded.scores)
        np.testing.assert_array_equal(sequential.elite.genome, threaded.elite.genome)


if __name__ == '__main__':
    unittest.main()
