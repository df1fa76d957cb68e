"""
Tests for I/O utilities and data models.

Tests city CSV parsing, score history export, result serialization,
and output folder handling.
"""

import unittest
import tempfile
import shutil
from pathlib import Path

import numpy as np
import yaml

from ga_core.data_models import (
    ContinuousResult,
    GenerationRecord,
    Individual,
    PermutationResult,
    Population,
    effective_population_size,
    summarize_history,
)
from ga_core.io_utils import (
    create_output_folder,
    load_cities_csv,
    load_score_history,
    load_yaml,
    save_best_solution,
    save_convergence_summary,
    save_score_history,
)


class TestDataModels(unittest.TestCase):
    """Test core data model classes."""

    def test_effective_population_size(self):
        """Test odd sizes round up to the next even number."""
        self.assertEqual(effective_population_size(2), 2)
        self.assertEqual(effective_population_size(7), 8)
        self.assertEqual(effective_population_size(50), 50)

    def test_individual_copy(self):
        """Test Individual copy owns its genome."""
        ind1 = Individual(genome=np.array([1.0, 2.0]), score=5.0)
        ind2 = ind1.copy()

        # Modify copy
        ind2.genome[0] = 10.0

        # Original should be unchanged
        self.assertEqual(ind1.genome[0], 1.0)
        self.assertEqual(ind2.score, 5.0)

    def test_population_best(self):
        """Test Population returns its lowest-scoring member."""
        population = Population([
            Individual(genome=np.array([k]), score=s) for k, s in enumerate([3.0, 1.0, 2.0])
        ])

        self.assertEqual(len(population), 3)
        self.assertEqual(population.best().score, 1.0)
        np.testing.assert_array_equal(population.scores(), [3.0, 1.0, 2.0])
        self.assertEqual(len(population.genomes()), 3)

    def test_empty_population_best(self):
        """Test best() rejects an empty population."""
        with self.assertRaises(ValueError):
            Population([]).best()

    def test_generation_record_to_dict(self):
        """Test GenerationRecord summary row."""
        record = GenerationRecord(
            generation=4,
            scores=np.array([1.0, 2.0, 6.0]),
            elite=Individual(genome=np.array([0]), score=1.0)
        )

        self.assertEqual(record.to_dict(), {'generation': 4, 'min': 1.0, 'mean': 3.0, 'max': 6.0})

    def test_summarize_history(self):
        """Test per-generation summary rows are 1-based."""
        rows = summarize_history(np.array([[1.0, 3.0], [0.5, 1.5]]))

        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0], {'generation': 1, 'min': 1.0, 'mean': 2.0, 'max': 3.0})
        self.assertEqual(rows[1]['generation'], 2)

    def test_result_to_dict(self):
        """Test results serialize to plain Python types."""
        history = np.array([[2.0, 4.0], [1.0, 2.0]])
        population = Population([Individual(genome=np.array([1, 0, 2]), score=1.0)])

        tour = PermutationResult(
            best_tour=np.array([1, 0, 2]), best_length=1.0,
            final_population=population, score_history=history
        )
        vector = ContinuousResult(
            best_genome=np.array([0.5, 0.25]), best_score=1.0,
            final_population=population, score_history=history
        )

        tour_data = tour.to_dict()
        self.assertEqual(tour_data['best_tour'], [1, 0, 2])
        self.assertIsInstance(tour_data['best_tour'][0], int)
        self.assertEqual(tour_data['num_generations'], 2)
        self.assertEqual(tour_data['population_size'], 2)

        vector_data = vector.to_dict()
        self.assertEqual(vector_data['best_genome'], [0.5, 0.25])
        self.assertIsInstance(vector_data['best_score'], float)
        self.assertEqual(len(vector.convergence_summary()), 2)


class TestIOUtils(unittest.TestCase):
    """Test I/O utility functions."""

    def setUp(self):
        """Create temporary directory for tests."""
        self.temp_dir = tempfile.mkdtemp()
        self.temp_path = Path(self.temp_dir)

    def tearDown(self):
        """Clean up temporary directory."""
        shutil.rmtree(self.temp_dir)

    def test_load_cities_csv(self):
        """Test loading cities with an optional name column."""
        csv_path = self.temp_path / "cities.csv"
        with open(csv_path, 'w') as f:
            f.write("name,x,y\n")
            f.write("depot,0.0,0.0\n")
            f.write("north,0.0,2.5\n")
            f.write("east,3,0\n")

        coords = load_cities_csv(csv_path)

        self.assertEqual(coords.shape, (3, 2))
        np.testing.assert_array_equal(coords[1], [0.0, 2.5])
        np.testing.assert_array_equal(coords[2], [3.0, 0.0])

    def test_load_cities_without_names(self):
        """Test x,y-only files load."""
        csv_path = self.temp_path / "plain.csv"
        with open(csv_path, 'w') as f:
            f.write("x,y\n1,2\n3,4\n")

        np.testing.assert_array_equal(load_cities_csv(csv_path), [[1.0, 2.0], [3.0, 4.0]])

    def test_load_cities_invalid_file(self):
        """Test missing files, bad headers, bad values and empty files."""
        with self.assertRaises(FileNotFoundError):
            load_cities_csv(self.temp_path / "missing.csv")

        bad_header = self.temp_path / "bad_header.csv"
        bad_header.write_text("lon,lat\n1,2\n")
        with self.assertRaises(ValueError):
            load_cities_csv(bad_header)

        bad_value = self.temp_path / "bad_value.csv"
        bad_value.write_text("x,y\n1,north\n")
        with self.assertRaises(ValueError):
            load_cities_csv(bad_value)

        empty = self.temp_path / "empty.csv"
        empty.write_text("x,y\n")
        with self.assertRaises(ValueError):
            load_cities_csv(empty)

    def test_score_history_round_trip(self):
        """Test the score history CSV reloads exactly."""
        history = np.array([[0.1, 0.2, 1.0 / 3.0], [0.05, 0.2, 0.25]])
        output_path = self.temp_path / "nested" / "score_history.csv"

        save_score_history(history, output_path)

        with open(output_path) as f:
            header = f.readline().strip()
        self.assertEqual(header, "generation,rank_001,rank_002,rank_003")
        np.testing.assert_array_equal(load_score_history(output_path), history)

    def test_save_overwrite_protection(self):
        """Test saves refuse to overwrite without the flag."""
        csv_path = self.temp_path / "existing.csv"
        csv_path.touch()
        history = np.zeros((1, 2))

        # Should fail without overwrite=True
        with self.assertRaises(FileExistsError):
            save_score_history(history, csv_path, overwrite=False)

        # Should succeed with overwrite=True
        save_score_history(history, csv_path, overwrite=True)

    def test_save_convergence_summary(self):
        """Test convergence CSV has one row per generation."""
        rows = summarize_history(np.array([[1.0, 3.0], [0.5, 1.5], [0.5, 0.5]]))
        output_path = save_convergence_summary(rows, self.temp_path / "convergence.csv")

        lines = output_path.read_text().strip().splitlines()
        self.assertEqual(lines[0], "generation,min,mean,max")
        self.assertEqual(len(lines), 4)

    def test_save_best_solution(self):
        """Test best solution YAML keeps keys and adds a timestamp."""
        output_path = save_best_solution(
            {'best_tour': [2, 0, 1], 'best_length': 3.5},
            self.temp_path / "best_solution.yaml"
        )

        data = load_yaml(output_path)
        self.assertEqual(data['best_tour'], [2, 0, 1])
        self.assertEqual(data['best_length'], 3.5)
        self.assertIn('saved_at', data)

        with open(output_path) as f:
            self.assertEqual(yaml.safe_load(f)['best_length'], 3.5)

    def test_create_output_folder(self):
        """Test output folder creation and overwrite protection."""
        root = self.temp_path / "run"

        create_output_folder(root)
        self.assertTrue(root.is_dir())

        with self.assertRaises(FileExistsError):
            create_output_folder(root)

        # Reuse allowed with overwrite
        self.assertEqual(create_output_folder(root, overwrite=True), root)

    def test_load_yaml_missing(self):
        """Test loading a missing YAML file."""
        with self.assertRaises(FileNotFoundError):
            load_yaml(self.temp_path / "nope.yaml")


if __name__ == '__main__':
    unittest.main()
