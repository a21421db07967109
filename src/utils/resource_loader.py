"""리소스 파일(YAML) 로더 유틸리티

규칙 테이블은 패키지 내부 ``src/resources`` 에 포함되어 배포됩니다.
매칭 규칙이 없으면 하드 불일치 판정이 꺼지므로, 누락/손상 시 ConfigurationException을 발생시킵니다.
"""
import os
import yaml
from typing import Any, Dict
from functools import lru_cache

from src.core.exceptions import ConfigurationException
from src.core.logging import logger


def get_resource_path(relative_path: str) -> str:
    """패키지(src) 기준 리소스 절대 경로 반환"""
    # src/utils/resource_loader.py -> src/utils -> src
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base_dir, "resources", relative_path)


@lru_cache(maxsize=32)
def load_yaml_resource(relative_path: str) -> Dict[str, Any]:
    """YAML 리소스 로드 및 캐싱

    Raises:
        ConfigurationException: 파일이 없거나 YAML 매핑이 아닌 경우
    """
    path = get_resource_path(relative_path)
    if not os.path.exists(path):
        logger.error(f"Resource not found: {path}")
        raise ConfigurationException(f"resource:{relative_path}", {"path": path})

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load YAML resource {path}: {e}")
        raise ConfigurationException(f"resource:{relative_path}", {"path": path, "error": str(e)}) from e

    if not isinstance(data, dict):
        raise ConfigurationException(f"resource:{relative_path}", {"path": path, "error": "not a mapping"})
    return data


def load_brand_rules() -> list[Dict[str, Any]]:
    """체인 브랜드 규칙 로드 ([{id, patterns}])"""
    data = load_yaml_resource("matching/brands.yaml")
    return data.get("brands", [])


def load_key_group_rules() -> Dict[str, Any]:
    """위치 키 그룹 규칙 및 가점 설정 로드"""
    data = load_yaml_resource("matching/key_groups.yaml")
    return {
        "groups": data.get("key_groups", []),
        "boost": data.get("boost", {}),
    }


def load_accommodation_type_rules() -> Dict[str, Any]:
    """숙소 유형 그룹 및 가점/감점 설정 로드"""
    data = load_yaml_resource("matching/accommodation_types.yaml")
    return {
        "groups": data.get("accommodation_types", []),
        "boost": data.get("boost", {}),
        "penalty": data.get("penalty", {}),
    }


def load_matching_vocabulary() -> Dict[str, frozenset[str]]:
    """불용어 및 위치 수식어 로드"""
    data = load_yaml_resource("matching/stopwords.yaml")
    return {
        "stopwords": frozenset(data.get("stopwords", [])),
        "location_qualifiers": frozenset(data.get("location_qualifiers", [])),
    }


def load_travel_params() -> Dict[str, Any]:
    """Google Travel 지원 hl 목록 및 통화 기호 매핑 로드"""
    data = load_yaml_resource("search/travel_params.yaml")
    return {
        "supported_hl": frozenset(str(x) for x in data.get("supported_hl", [])),
        "currency_symbols": dict(data.get("currency_symbols", {})),
    }
