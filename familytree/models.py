"""Request payloads validated at the API boundary."""

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class MemberPayload(BaseModel):
    """Member attributes for create and full update."""
    
    first_name: str = Field(min_length=1)
    middle_name: Optional[str] = None
    last_name: str = Field(min_length=1)
    date_of_birth: Optional[date] = None
    date_of_death: Optional[date] = None
    is_alive: bool = True
    
    @model_validator(mode="after")
    def check_dates(self) -> "MemberPayload":
        if self.date_of_birth and self.date_of_death and self.date_of_death < self.date_of_birth:
            raise ValueError("date_of_death cannot be before date_of_birth")
        return self


class RelationshipTypeCreate(BaseModel):
    """New relationship type. self_inverse marks types like Spouse."""
    
    name: str = Field(min_length=1)
    inverse_type_id: Optional[str] = None
    self_inverse: bool = False


class RelationshipTypeUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value, inverse_type_id=null clears it."""
    
    name: Optional[str] = Field(default=None, min_length=1)
    inverse_type_id: Optional[str] = None
    self_inverse: Optional[bool] = None


class RelationshipPayload(BaseModel):
    """member_id_1 is <relationship_type_id> of member_id_2."""
    
    member_id_1: str = Field(min_length=1)
    relationship_type_id: str = Field(min_length=1)
    member_id_2: str = Field(min_length=1)
    
    @property
    def is_self_reference(self) -> bool:
        return self.member_id_1 == self.member_id_2
