"""
Unit tests for plot generation.

Runs a short mission on synthetic telemetry once and checks that every
figure is written.
"""

import os
import shutil
import tempfile
import unittest

import numpy as np

from liftoff_sim.config import create_test_config
from liftoff_sim.main import run_mission
from liftoff_sim.plotting import TrajectoryData, extract_log_data, generate_all_plots

from conftest import make_raw_profile


class TestPlotGeneration(unittest.TestCase):
    """Test suite for plot generation functionality."""

    @classmethod
    def setUpClass(cls):
        cls.result = run_mission(make_raw_profile(), create_test_config(dynamics_duration=10.0))

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_generate_all_plots_creates_files(self):
        saved = generate_all_plots(self.result, self.temp_dir)
        self.assertEqual(len(saved), 5)
        for path in saved:
            self.assertTrue(os.path.exists(path), f"Plot file not found: {path}")
            self.assertTrue(path.endswith('.png'))

    def test_output_directory_created(self):
        new_dir = os.path.join(self.temp_dir, 'new_subdir', 'nested')
        saved = generate_all_plots(self.result, new_dir)
        self.assertTrue(os.path.isdir(new_dir))
        self.assertGreater(len(saved), 0)

    def test_extract_log_data_shapes(self):
        data = extract_log_data(self.result.dynamics_log)
        self.assertIsInstance(data, TrajectoryData)
        n = len(self.result.dynamics_log)
        self.assertEqual(data.time.shape, (n,))
        self.assertEqual(data.position.shape, (n, 2))
        self.assertEqual(data.jerk.shape, (n, 2))
        np.testing.assert_array_equal(data.mass, self.result.dynamics_log.mass)
