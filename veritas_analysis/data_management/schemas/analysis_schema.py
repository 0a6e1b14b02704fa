"""Analytical records produced by the analysis core.

Records are value objects: produced fresh by each analysis call, never
updated in place, never persisted by the core. Bounded scores are enforced
by Field constraints so an out-of-range value fails loudly at construction.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from veritas_analysis.data_management.schemas.graph_schema import TimeFrame


class PatternType(str, Enum):
    """Spread pattern label.

    ORGANIC: diverse, unsynchronized spread
    COORDINATED: several accounts acting inside one short window
    AUTOMATED: a single account acting at machine-like regularity
    """

    ORGANIC = "organic"
    COORDINATED = "coordinated"
    AUTOMATED = "automated"


class Pattern(BaseModel):
    """A classified cluster of interactions.

    Pattern ids are generated per run; callers must not compare patterns
    from different runs by id.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: PatternType
    confidence: float = Field(..., ge=0.0, le=1.0)
    nodes: List[str] = Field(default_factory=list)
    edges: List[str] = Field(default_factory=list)
    timeframe: TimeFrame

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "0d7c2f0e-51f4-4a57-9a3e-7c1de0b7a4c1",
                    "type": "coordinated",
                    "confidence": 0.9,
                    "nodes": ["acct-1", "acct-2"],
                    "edges": ["e-1", "e-2", "e-3"],
                    "timeframe": {
                        "start": "2024-03-15T14:00:00Z",
                        "end": "2024-03-15T14:30:00Z",
                    },
                }
            ]
        }
    }


class DeviationMetrics(BaseModel):
    """Reality-deviation profile of one content item.

    deviation_magnitude and propagation_velocity are unbounded non-negative
    reals; every other score is bounded to [0, 1].
    """

    baseline_score: float = Field(..., ge=0.0, le=1.0)
    deviation_magnitude: float = Field(..., ge=0.0)
    propagation_velocity: float = Field(..., ge=0.0, description="Shares per hour")
    cross_reference_score: float = Field(..., ge=0.0, le=1.0)
    source_credibility: float = Field(..., ge=0.0, le=1.0)
    impact_score: float = Field(..., ge=0.0, le=1.0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "baseline_score": 0.62,
                    "deviation_magnitude": 0.19,
                    "propagation_velocity": 12.5,
                    "cross_reference_score": 0.56,
                    "source_credibility": 0.71,
                    "impact_score": 0.33,
                }
            ]
        }
    }


class ContentAnalysisResult(BaseModel):
    """Full analysis of one content item: patterns, deviation and context."""

    content_id: str
    patterns: List[Pattern] = Field(default_factory=list)
    deviation_metrics: DeviationMetrics
    related_content: List[str] = Field(default_factory=list)
    narrative_consistency: float = Field(0.0, ge=0.0, le=1.0)
    source_credibility: float = Field(..., ge=0.0, le=1.0)
    trust_score: float = Field(..., ge=0.0, le=1.0)
    deviating_factors: List[str] = Field(default_factory=list)
    analysis_timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
