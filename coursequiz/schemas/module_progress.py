from typing import Optional

from pydantic import BaseModel, Field

from coursequiz.core.base_config import BaseConfig, UTCDateTime


class ModuleProgressUpdate(BaseModel):
    progress_percentage: int = Field(ge=0, le=100)

    @property
    def completed(self) -> bool:
        return self.progress_percentage == 100


class ModuleProgressResponse(BaseConfig):
    module_id: str
    progress_percentage: int
    completed: bool
    updated_at: Optional[UTCDateTime]
