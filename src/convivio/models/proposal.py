"""
Convivio - Backend-mediated proposal models.

The server-side variant asks for a flatter shape: one list of courses, each
with a cellar wine and a market alternative. Wire keys are camelCase.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

CourseType = Literal["starter", "first", "main", "side", "dessert"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProposalCellarWine(_CamelModel):
    name: str
    reasoning: str = ""


class ProposalMarketWine(_CamelModel):
    name: str
    details: str | None = None
    reasoning: str = ""


class ProposalCourse(_CamelModel):
    course: CourseType
    name: str
    description: str = ""
    dietary_flags: list[str] = Field(default_factory=list)
    prep_time: int | None = None
    notes: str | None = None
    cellar_wine: ProposalCellarWine | None = None
    market_wine: ProposalMarketWine | None = None

    @field_validator("course", mode="before")
    @classmethod
    def _lower_course(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class MenuProposal(_CamelModel):
    courses: list[ProposalCourse] = Field(min_length=1)
    reasoning: str = ""
    wine_strategy: str | None = None
    season_context: str = ""
    guest_considerations: list[str] = Field(default_factory=list)
    total_prep_time: int | None = None
    generated_at: datetime = Field(default_factory=datetime.now)


class WineProposal(_CamelModel):
    id: str = ""
    dinner_id: str | None = None
    type: Literal["available", "suggested_purchase"]
    wine_id: str | None = None
    suggested_wine_name: str | None = None
    suggested_wine_details: str | None = None
    course: CourseType
    reasoning: str = ""
    is_selected: bool = False
    created_at: datetime = Field(default_factory=datetime.now)


class WineProposals(_CamelModel):
    available: list[WineProposal] = Field(default_factory=list)
    suggested: list[WineProposal] = Field(default_factory=list)


class ProposeRequest(_CamelModel):
    dinner_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)


class ProposeResponse(_CamelModel):
    success: bool = True
    menu: MenuProposal
    wine_proposals: WineProposals
