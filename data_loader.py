# data_loader.py
"""
YAML document store for conditions and antibiotics.

Layout under the data directory:
- antibiotics/<antibiotic-id>.yml
- categories/<category-id>/<condition-id>.yml
"""
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

import config
from antibiotic_resolver import catalog_file_id
from models import AntibioticRecord, ConditionRecord

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yml", ".yaml")


class DataUnavailable(Exception):
    """A requested guideline document could not be provided."""


class RecordNotFound(DataUnavailable):
    pass


class InvalidRecord(DataUnavailable):
    pass


def _data_dir(data_dir):
    return Path(data_dir) if data_dir is not None else Path(config.DATA_DIR)


def read_document(path):
    """Parse one YAML document into plain Python data."""
    path = Path(path)
    if not path.is_file():
        raise RecordNotFound(f"No document at {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidRecord(f"Unreadable YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidRecord(f"Expected a mapping at the top of {path}")
    return data


def _validate(model, data, path):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidRecord(f"{path} failed validation: {e}") from e


def _find_document(directory, stem):
    for suffix in YAML_SUFFIXES:
        candidate = directory / f"{stem}{suffix}"
        if candidate.is_file():
            return candidate
    raise RecordNotFound(f"No document named '{stem}' in {directory}")


def load_condition(category_id, condition_id, data_dir=None):
    directory = _data_dir(data_dir) / "categories" / category_id
    path = _find_document(directory, condition_id)
    logger.debug("Loading condition %s/%s from %s", category_id, condition_id, path)
    return _validate(ConditionRecord, read_document(path), path)


def load_antibiotic(antibiotic_id, data_dir=None):
    directory = _data_dir(data_dir) / "antibiotics"
    path = _find_document(directory, antibiotic_id)
    logger.debug("Loading antibiotic %s from %s", antibiotic_id, path)
    return _validate(AntibioticRecord, read_document(path), path)


def load_antibiotics_for_condition(condition, data_dir=None):
    """
    Antibiotic catalog for every regimen token of a condition.

    Each record is stored under the raw token and its file id, in first-seen
    order. Missing or invalid antibiotics are logged and skipped so one bad
    document never blocks the rest of the page.
    """
    catalog = {}
    for token in condition.regimen_tokens():
        file_id = catalog_file_id(token)
        if not file_id:
            continue
        try:
            record = load_antibiotic(file_id, data_dir)
        except DataUnavailable as e:
            logger.warning("Could not load data for antibiotic '%s': %s", token, e)
            continue
        catalog[token] = record
        catalog.setdefault(file_id, record)
    return catalog


def list_categories(data_dir=None):
    categories_dir = _data_dir(data_dir) / "categories"
    if not categories_dir.is_dir():
        logger.warning("Categories directory missing: %s", categories_dir)
        return []
    return sorted(
        entry.name for entry in categories_dir.iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    )


def _yaml_files(directory):
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.suffix in YAML_SUFFIXES)


def list_category_conditions(category_id, data_dir=None):
    conditions = []
    for path in _yaml_files(_data_dir(data_dir) / "categories" / category_id):
        try:
            conditions.append(_validate(ConditionRecord, read_document(path), path))
        except DataUnavailable as e:
            logger.warning("Skipping condition document: %s", e)
    return conditions


def list_antibiotics(data_dir=None):
    antibiotics = []
    for path in _yaml_files(_data_dir(data_dir) / "antibiotics"):
        try:
            antibiotics.append(_validate(AntibioticRecord, read_document(path), path))
        except DataUnavailable as e:
            logger.warning("Skipping antibiotic document: %s", e)
    return antibiotics


def iter_documents(data_dir=None):
    """Yield (kind, category, raw document) for every readable document."""
    root = _data_dir(data_dir)
    for path in _yaml_files(root / "antibiotics"):
        try:
            yield "antibiotic", None, read_document(path)
        except DataUnavailable as e:
            logger.warning("Skipping unreadable document: %s", e)
    for category in list_categories(root):
        for path in _yaml_files(root / "categories" / category):
            try:
                yield "condition", category, read_document(path)
            except DataUnavailable as e:
                logger.warning("Skipping unreadable document: %s", e)
