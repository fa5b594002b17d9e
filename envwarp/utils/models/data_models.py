from pydantic import BaseModel, Field
from typing import List, Literal, Optional, Union


class PipelineMode(BaseModel):
    """Resolve env files and secrets, render templates, optionally exec."""
    kind: Literal["pipeline"] = "pipeline"
    env_files: List[str] = Field(default_factory=list)


class ProbeMode(BaseModel):
    """Run a single health check and exit with its status."""
    kind: Literal["probe"] = "probe"
    address: Optional[str] = None


class VersionMode(BaseModel):
    kind: Literal["version"] = "version"


Mode = Union[PipelineMode, ProbeMode, VersionMode]


class FileResolution(BaseModel):
    """Outcome of resolving one env file."""
    path: str
    passes: int
    stable: bool
