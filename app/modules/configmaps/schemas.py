from pydantic import BaseModel, model_validator
from typing import Optional, Dict, List


class ConfigMapCheckRequest(BaseModel):
    data: Optional[Dict[str, str]] = None  # ConfigMap data section
    properties: Optional[str] = None  # or an application.properties document

    @model_validator(mode="after")
    def require_data_or_properties(self):
        if self.data is None and self.properties is None:
            raise ValueError("Either data or properties must be set")
        if self.data is not None and self.properties is not None:
            raise ValueError("Cannot set both data and properties")
        return self


class ConfigMapCheck(BaseModel):
    valid: bool
    missing_keys: List[str]
    empty_keys: List[str]
    ddl_auto_valid: bool
    keys: Dict[str, str]


class ConfigMapKeysResponse(BaseModel):
    required_keys: List[str]
    ddl_auto_values: List[str]
