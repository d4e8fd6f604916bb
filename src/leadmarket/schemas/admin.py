"""
Administrator settings and role schemas
"""
from pydantic import Field
from leadmarket.schemas.base import BaseSchema, IDSchema


class LeadMatchingSettings(BaseSchema):
    """
    Lead-matching algorithm configuration.
    Weights are relative and are stored as given.
    """
    min_score: float = Field(0.6, ge=0, le=1)
    max_matches_per_lead: int = Field(5, ge=1, le=20)
    consider_portfolio: bool = True
    consider_expertise: bool = True
    consider_budget: bool = True
    expertise_weight: float = Field(0.4, ge=0, le=1)
    portfolio_weight: float = Field(0.3, ge=0, le=1)
    budget_weight: float = Field(0.2, ge=0, le=1)
    location_weight: float = Field(0.1, ge=0, le=1)

    @property
    def weight_sum(self) -> float:
        return (
            self.expertise_weight
            + self.portfolio_weight
            + self.budget_weight
            + self.location_weight
        )


class RoleCreate(BaseSchema):
    name: str


class RoleSchema(IDSchema):
    name: str
