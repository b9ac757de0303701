from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, List, Optional
from utils.constants import ROOMS


class LayoutIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    procedureType: str
    flowCount: int
    rooms: List[str]


class RoomRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    layouts: List[LayoutIn] = Field(default_factory=list)
    # procedure type -> preferred room
    preferredRooms: Dict[str, str] = Field(default_factory=dict)
    rooms: List[str] = Field(default_factory=lambda: list(ROOMS))
    seed: Optional[int] = None
