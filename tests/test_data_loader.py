# test_data_loader.py
import logging

import pytest

from data_loader import (
    DataUnavailable,
    InvalidRecord,
    RecordNotFound,
    iter_documents,
    list_antibiotics,
    list_categories,
    list_category_conditions,
    load_antibiotic,
    load_antibiotics_for_condition,
    load_condition,
    read_document,
)

CONDITION_YAML = """
id: sinusitis
name: Acute Sinusitis
category: ent
treatment_lines:
  first_line:
    adult:
      outpatient_mild:
        regimen: Amoxicillin
        route: PO
        dosing: 500 mg PO q8h
"""


@pytest.fixture
def store(tmp_path):
    (tmp_path / "antibiotics").mkdir()
    (tmp_path / "categories" / "ent").mkdir(parents=True)
    (tmp_path / "categories" / "ent" / "sinusitis.yml").write_text(CONDITION_YAML)
    (tmp_path / "antibiotics" / "amoxicillin.yaml").write_text(
        "id: amoxicillin\nname: Amoxicillin\nclass: Aminopenicillin\n"
    )
    return tmp_path


def test_load_condition(store):
    condition = load_condition("ent", "sinusitis", store)
    assert condition.name == "Acute Sinusitis"
    assert condition.treatment_lines.second_line is None
    assert condition.treatment_lines.first_line.pediatric == {}


def test_load_antibiotic_accepts_yaml_suffix(store):
    assert load_antibiotic("amoxicillin", store).drug_class == "Aminopenicillin"


def test_missing_documents(store):
    with pytest.raises(RecordNotFound):
        load_antibiotic("linezolid", store)
    with pytest.raises(RecordNotFound):
        load_condition("ent", "otitis", store)
    with pytest.raises(DataUnavailable):
        load_condition("cardiac", "endocarditis", store)


def test_unparsable_yaml(tmp_path):
    path = tmp_path / "broken.yml"
    path.write_text("id: [unclosed\n")
    with pytest.raises(InvalidRecord):
        read_document(path)


def test_top_level_must_be_mapping(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- one\n- two\n")
    with pytest.raises(InvalidRecord):
        read_document(path)


def test_schema_violation(store):
    (store / "antibiotics" / "bad.yml").write_text(
        "id: bad\nname: Bad\nclass: Test\nadult:\n  x:\n    dose: 1 g\n    route: XX\n    frequency: q24h\n"
    )
    with pytest.raises(InvalidRecord):
        load_antibiotic("bad", store)


def test_listing_skips_invalid_documents(store, caplog):
    (store / "categories" / "ent" / "broken.yml").write_text("id: broken\n")
    with caplog.at_level(logging.WARNING):
        conditions = list_category_conditions("ent", store)
    assert [c.id for c in conditions] == ["sinusitis"]
    assert "Skipping condition document" in caplog.text


def test_list_categories(store, tmp_path):
    assert list_categories(store) == ["ent"]
    assert list_categories(tmp_path / "nowhere") == []


def test_catalog_skips_missing_antibiotics(store, caplog):
    condition = load_condition("ent", "sinusitis", store)
    (store / "antibiotics" / "amoxicillin.yaml").unlink()
    with caplog.at_level(logging.WARNING):
        assert load_antibiotics_for_condition(condition, store) == {}
    assert "Amoxicillin" in caplog.text


def test_bundled_catalog_for_pneumonia(pneumonia, data_dir):
    catalog = load_antibiotics_for_condition(pneumonia, data_dir)
    assert catalog["Piperacillin-Tazobactam"].id == "piperacillin-tazobactam"
    assert catalog["piperacillin-tazobactam"] is catalog["Piperacillin-Tazobactam"]
    assert "Ampicillin" not in catalog


def test_bundled_data_is_valid(data_dir):
    assert list_categories(data_dir) == ["respiratory", "skin-soft-tissue"]
    assert len(list_antibiotics(data_dir)) == 10
    for category in list_categories(data_dir):
        assert list_category_conditions(category, data_dir)


def test_iter_documents(store):
    kinds = [(kind, category) for kind, category, _ in iter_documents(store)]
    assert kinds == [("antibiotic", None), ("condition", "ent")]
