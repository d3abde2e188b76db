from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_by_name=True)


class EquipmentEntry(CamelModel):
    name: str
    label: str
    count: int = Field(..., ge=0)


class GainEntry(CamelModel):
    type: str
    name: str
    label: str
    count: int = Field(..., ge=0)
    content: List["GainEntry"] = Field(default_factory=list)


GainEntry.model_rebuild()


class SelectedUpgradeEntry(CamelModel):
    id: str
    label: str
    cost: Optional[str] = None
    gains: List[GainEntry]


class OptionState(CamelModel):
    id: str
    label: str
    cost: Optional[str] = None
    applied: bool
    count: int
    valid: bool


class SectionState(CamelModel):
    id: str
    label: str
    type: str
    control: str
    options: List[OptionState]


class UnitState(CamelModel):
    id: str
    definition_id: str = Field(..., alias="definitionId")
    name: str
    size: int
    combined: bool
    total: int
    equipment: List[EquipmentEntry]
    special_rules: List[str] = Field(..., alias="specialRules")
    selected_upgrades: List[SelectedUpgradeEntry] = Field(..., alias="selectedUpgrades")
    sections: List[SectionState]


class ListStateResponse(CamelModel):
    army_book: str = Field(..., alias="armyBook")
    name: str
    points_limit: Optional[int] = Field(None, alias="pointsLimit")
    total: int
    over_limit: bool = Field(..., alias="overLimit")
    units: List[UnitState]


class CatalogUnit(CamelModel):
    id: str
    name: str
    size: int
    cost: int
    quality: Optional[int] = None
    defense: Optional[int] = None
    equipment: List[str]
    special_rules: List[str] = Field(..., alias="specialRules")
    upgrades: List[str]


class CatalogResponse(CamelModel):
    uid: str
    name: str
    version: Optional[str] = None
    units: List[CatalogUnit]


class UiEventEntry(CamelModel):
    kind: str
    message: str


class ApiResponse(CamelModel):
    ok: bool
    message: Optional[str] = None
    message_kind: Optional[str] = Field(None, alias="messageKind")
    events: List[UiEventEntry] = Field(default_factory=list)
    state: Optional[ListStateResponse] = None


class AddUnitRequest(CamelModel):
    unit_id: str = Field(..., alias="unitId")


class CombinedRequest(CamelModel):
    combined: bool


class OptionRequest(CamelModel):
    section_id: str = Field(..., alias="sectionId")
    option_id: str = Field(..., alias="optionId")
