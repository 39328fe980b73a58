import json

import pytest

from weekly_expenses import config


def test_default_categories() -> None:
    values = [category.value for category in config.load_categories()]
    assert values[:5] == ['food', 'transport', 'housing', 'entertainment', 'other']
    assert len(values) == 10


def test_load_categories_from_file(tmp_path) -> None:
    path = tmp_path / 'categories.json'
    path.write_text(json.dumps([
        {'value': 'food', 'label': 'Groceries', 'color': '#123456'},
        {'value': 'pets'},
    ]), encoding='utf-8')
    categories = config.load_categories(path)
    assert [c.value for c in categories] == ['food', 'pets']
    assert categories[0].label == 'Groceries'
    assert categories[1].label == 'Pets'


def test_load_categories_from_environment(tmp_path, monkeypatch) -> None:
    path = tmp_path / 'categories.json'
    path.write_text(json.dumps([{'value': 'rent'}]), encoding='utf-8')
    monkeypatch.setattr(config, 'CATEGORIES_PATH', str(path))
    assert [c.value for c in config.load_categories()] == ['rent']


@pytest.mark.parametrize('payload', [[], {'value': 'food'}, [{'label': 'x'}], [{'value': 'a'}, {'value': 'a'}]])
def test_load_categories_rejects_bad_files(tmp_path, payload) -> None:
    path = tmp_path / 'categories.json'
    path.write_text(json.dumps(payload), encoding='utf-8')
    with pytest.raises(ValueError):
        config.load_categories(path)


def test_ensure_data_directories_creates_configured_dirs(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, 'DATA_DIR', tmp_path / 'data')
    monkeypatch.setattr(config, 'DB_PATH', tmp_path / 'db' / 'weekly.db')
    monkeypatch.setattr(config, 'LOCAL_STORAGE_PATH', tmp_path / 'device' / 'local.json')
    config.ensure_data_directories()
    assert (tmp_path / 'data').is_dir()
    assert (tmp_path / 'db').is_dir()
    assert (tmp_path / 'device').is_dir()


def test_ensure_data_directories_explicit_paths(tmp_path) -> None:
    target = tmp_path / 'a' / 'b'
    config.ensure_data_directories(target)
    assert target.is_dir()


def test_stores_create_missing_directories(tmp_path) -> None:
    from weekly_expenses.db import Database
    from weekly_expenses.local_storage import LocalStorage

    Database(tmp_path / 'nested' / 'weekly.db').init_db()
    LocalStorage(tmp_path / 'device' / 'local.json').set('expenses', [])
    assert (tmp_path / 'nested' / 'weekly.db').exists()
    assert (tmp_path / 'device' / 'local.json').exists()
