from pydantic import BaseModel, Field, model_validator
from typing import Optional, Dict, List


class WorkshopContent(BaseModel):
    url: Optional[str] = None


class LabModule(BaseModel):
    id: str
    name: Optional[str] = None
    file: Optional[str] = None
    vars: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def default_name_and_file(self):
        if not self.name:
            self.name = self.id
        if not self.file:
            self.file = f"{self.id}.md"
        return self


class WorkshopDefinition(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    content: WorkshopContent = Field(default_factory=WorkshopContent)
    vars: Dict[str, str] = Field(default_factory=dict)
    modules: List[LabModule]
    source_url: Optional[str] = None

    @model_validator(mode="after")
    def require_unique_modules(self):
        if not self.modules:
            raise ValueError(f"Workshop {self.id} defines no modules")
        seen = set()
        for module in self.modules:
            if module.id in seen:
                raise ValueError(f"Workshop {self.id} has duplicate module id: {module.id}")
            seen.add(module.id)
        return self


class WorkshopSummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    lab_count: int


class LabPage(BaseModel):
    workshop_id: str
    lab_id: str
    title: str
    html: str
    index: int
    previous_lab_id: Optional[str] = None
    next_lab_id: Optional[str] = None
