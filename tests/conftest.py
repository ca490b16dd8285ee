# conftest.py
from pathlib import Path

import pytest

from data_loader import load_condition
from models import PediatricDosingRule, Regimen

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def pneumonia(data_dir):
    return load_condition("respiratory", "pneumonia-cap", data_dir)


@pytest.fixture
def standard_rule():
    return PediatricDosingRule(dose_per_kg=15, frequency="q8h", max_daily=4000)


@pytest.fixture
def make_regimen():
    def _make(regimen="Ceftriaxone", route="IV", setting=None, **extra):
        return Regimen(regimen=regimen, route=route, dosing="see protocol", setting=setting, **extra)
    return _make
