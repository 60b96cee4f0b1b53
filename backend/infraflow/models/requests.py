"""API request models."""

from typing import Optional

from pydantic import BaseModel, Field

from infraflow.knowledge.models import IndustryType, TrafficTier
from infraflow.models.topology import Topology


class AnalyzeRequest(BaseModel):
    """Request to analyze a topology against the knowledge base."""

    topology: Topology
    min_confidence: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Confidence floor for the rendered prompt section (defaults to MIN_CONFIDENCE)",
    )


class CapacityRequest(BaseModel):
    """Request to estimate capacity, optionally with sizing for a target tier."""

    topology: Topology
    target_tier: Optional[TrafficTier] = None


class ComplianceRequest(BaseModel):
    """Request to check a topology against one industry's compliance rules."""

    topology: Topology
    industry: IndustryType
