from app.modules.configmaps.models import REQUIRED_KEYS, DDL_AUTO_KEY, DDL_AUTO_VALUES
from app.modules.configmaps.schemas import ConfigMapCheck
from typing import Dict
import logging

logger = logging.getLogger(__name__)


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse a Java .properties document into a flat dict.
    Supports key=value and key: value, '#' and '!' comments. Line continuations are not supported.
    """
    properties = {}
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(("#", "!")):
            continue
        positions = [p for p in (line.find("="), line.find(":")) if p >= 0]
        if not positions:
            logger.debug(f"Line {line_number} has no separator, treating as empty value")
            properties[line] = ""
            continue
        split_at = min(positions)
        key = line[:split_at].strip()
        value = line[split_at + 1:].strip()
        properties[key] = value
    return properties


def check_configmap(data: Dict[str, str]) -> ConfigMapCheck:
    """Compare ConfigMap data against the keys the Spring Boot datasource needs"""
    missing = [k for k in REQUIRED_KEYS if k not in data]
    empty = [k for k in REQUIRED_KEYS if k in data and not str(data[k]).strip()]
    ddl_auto = str(data.get(DDL_AUTO_KEY, "")).strip().lower()
    ddl_auto_valid = ddl_auto in DDL_AUTO_VALUES
    return ConfigMapCheck(
        valid=not missing and not empty,
        missing_keys=missing,
        empty_keys=empty,
        ddl_auto_valid=ddl_auto_valid,
        keys={k: v for k, v in data.items() if k in REQUIRED_KEYS and k != "spring.datasource.password"},
    )
