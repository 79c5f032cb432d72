from fastapi import APIRouter
from app.modules.configmaps.models import REQUIRED_KEYS, DDL_AUTO_VALUES
from app.modules.configmaps.schemas import ConfigMapCheckRequest, ConfigMapCheck, ConfigMapKeysResponse
from app.modules.configmaps.service import parse_properties, check_configmap
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/configmaps", tags=["configmaps"])


@router.get("/spring-datasource/keys", response_model=ConfigMapKeysResponse)
async def get_required_keys():
    """Keys the lab application expects in its ConfigMap"""
    return ConfigMapKeysResponse(required_keys=REQUIRED_KEYS, ddl_auto_values=DDL_AUTO_VALUES)


@router.post("/spring-datasource/check", response_model=ConfigMapCheck)
async def check_spring_datasource(request: ConfigMapCheckRequest):
    """Check a ConfigMap data section or application.properties text. The password is never echoed back."""
    data = request.data if request.data is not None else parse_properties(request.properties)
    result = check_configmap(data)
    if not result.valid:
        logger.info(f"ConfigMap check failed: missing={result.missing_keys} empty={result.empty_keys}")
    return result
