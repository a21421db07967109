"""YAML 규칙 테이블 로더 테스트"""
import os

import pytest

import src
from src.core.exceptions import ConfigurationException
from src.utils import resource_loader
from src.utils.resource_loader import (
    get_resource_path,
    load_brand_rules,
    load_matching_vocabulary,
    load_yaml_resource,
)


class TestResourcePath:
    """리소스는 패키지 내부에 위치"""

    @pytest.mark.parametrize("name", [
        "matching/brands.yaml",
        "matching/key_groups.yaml",
        "matching/accommodation_types.yaml",
        "matching/stopwords.yaml",
        "search/travel_params.yaml",
    ])
    def test_tables_ship_inside_package(self, name):
        path = get_resource_path(name)
        package_dir = os.path.dirname(os.path.abspath(src.__file__))

        assert os.path.isfile(path)
        assert os.path.commonpath([path, package_dir]) == package_dir

    def test_rules_are_loaded(self):
        brand_ids = {rule["id"] for rule in load_brand_rules()}
        assert "hilton" in brand_ids
        assert "hotel" in load_matching_vocabulary()["stopwords"]


class TestLoadFailures:
    """누락/손상된 테이블은 빈 규칙으로 대체되지 않음"""

    def test_missing_resource_raises(self):
        with pytest.raises(ConfigurationException) as exc_info:
            load_yaml_resource("matching/does_not_exist.yaml")
        assert exc_info.value.error_code == "CONFIG_ERROR"

    def test_broken_yaml_raises(self, tmp_path, monkeypatch):
        (tmp_path / "broken.yaml").write_text("brands: [unclosed", encoding="utf-8")
        monkeypatch.setattr(resource_loader, "get_resource_path", lambda rel: str(tmp_path / rel))

        with pytest.raises(ConfigurationException):
            load_yaml_resource("broken.yaml")

    def test_non_mapping_raises(self, tmp_path, monkeypatch):
        (tmp_path / "list.yaml").write_text("- a\n- b\n", encoding="utf-8")
        monkeypatch.setattr(resource_loader, "get_resource_path", lambda rel: str(tmp_path / rel))

        with pytest.raises(ConfigurationException):
            load_yaml_resource("list.yaml")
