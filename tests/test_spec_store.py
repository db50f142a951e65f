"""Tests for loading and saving program assumptions."""

import os
import sys
import json
import tempfile

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from model.defaults import default_inputs
from spec_store import (
    DEFAULT_BASE_PATH,
    list_existing_programs,
    load_inputs,
    save_inputs,
    save_spec,
    spec_path_for,
)


def test_save_spec_creates_directory_and_file():
    """save_spec creates the program directory and spec.json file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        spec = {'filingStatus': 'single', 'taxableBalance': 1000}

        result_path = save_spec(spec, 'testprogram', tmpdir)

        assert os.path.exists(result_path)
        assert result_path == spec_path_for('testprogram', tmpdir)
        with open(result_path, 'r') as f:
            assert json.load(f) == spec


def test_load_inputs_invalid_json_raises():
    with tempfile.TemporaryDirectory() as tmpdir:
        program_dir = os.path.join(tmpdir, 'input-parameters', 'broken')
        os.makedirs(program_dir)
        with open(os.path.join(program_dir, 'spec.json'), 'w') as f:
            f.write('{ not json')
        with pytest.raises(json.JSONDecodeError):
            load_inputs('broken', tmpdir)


def test_load_inputs_rejects_non_object_spec():
    with tempfile.TemporaryDirectory() as tmpdir:
        save_spec([1, 2, 3], 'listy', tmpdir)
        with pytest.raises(ValueError, match='JSON object'):
            load_inputs('listy', tmpdir)


def test_inputs_round_trip_through_disk():
    with tempfile.TemporaryDirectory() as tmpdir:
        inputs = default_inputs(2030)
        save_inputs(inputs, 'household', tmpdir)
        assert load_inputs('household', tmpdir) == inputs
        with open(spec_path_for('household', tmpdir), 'r') as f:
            assert json.load(f)['person1']['currentAge'] == 50


def test_load_inputs_missing_raises():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(FileNotFoundError):
            load_inputs('nonexistent', tmpdir)


def test_list_existing_programs_sorted_and_filtered():
    with tempfile.TemporaryDirectory() as tmpdir:
        save_spec({}, 'zeta', tmpdir)
        save_spec({}, 'alpha', tmpdir)
        # A folder without spec.json is not a program
        os.makedirs(os.path.join(tmpdir, 'input-parameters', 'empty'))
        assert list_existing_programs(tmpdir) == ['alpha', 'zeta']


def test_list_existing_programs_without_directory():
    with tempfile.TemporaryDirectory() as tmpdir:
        assert list_existing_programs(tmpdir) == []


def test_sample_program_is_shipped():
    assert 'sample' in list_existing_programs(DEFAULT_BASE_PATH)
    inputs = load_inputs('sample')
    assert inputs.person1.name == 'Alex'
    assert len(inputs.expense_phases) == 3
