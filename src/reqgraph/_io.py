import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ._cases import CatalogExpr
from ._expr import DependencyExpr, parse_dependency
from ._models import Requirement

logger = logging.getLogger(__name__)


class RequirementRecord(BaseModel):
    """A requirement as written in an input file."""

    id: str = Field(validation_alias=AliasChoices("id", "requirements Identifier"))
    text: str = Field(validation_alias=AliasChoices("text", "requirements text"))
    priority: int = Field(validation_alias=AliasChoices("priority", "Priority"))
    dependency: Any = Field(default_factory=list, validation_alias=AliasChoices("dependency", "dep"))

    @field_validator("dependency", mode="before")
    @classmethod
    def parse_dependency_field(cls, value: Any) -> DependencyExpr:
        # MalformedExpressionError is a ValueError, so pydantic reports it as a validation error
        return parse_dependency(value)

    def to_requirement(self) -> Requirement:
        return Requirement(id=self.id, text=self.text, priority=self.priority, dependency=tuple(self.dependency))


class InputFile(BaseModel):
    requirements: list[RequirementRecord] = Field(default_factory=list)
    expressions: list[str] = Field(default_factory=list)


@dataclass(slots=True)
class InputData:
    requirements: list[Requirement]
    catalog: list[CatalogExpr]


def parse_input(data: dict[str, Any]) -> InputData:
    """Validate raw input data and convert it to requirements and a catalog."""
    input_file = InputFile.model_validate(data)
    requirements = [record.to_requirement() for record in input_file.requirements]
    catalog = [CatalogExpr.from_text(text) for text in input_file.expressions]
    return InputData(requirements=requirements, catalog=catalog)


def load_input_from_toml(input_path: Path | str) -> InputData:
    """Load requirements and boolean expressions from a TOML file."""
    input_path = Path(input_path)
    with input_path.open("rb") as f:
        data = tomllib.load(f)
    input_data = parse_input(data)
    logger.info(
        f"Loaded {len(input_data.requirements)} requirements and "
        f"{len(input_data.catalog)} expressions from {input_path}",
    )
    return input_data
