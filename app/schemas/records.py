"""Pydantic schemas for normalized proxy responses."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class CommuneRecord(BaseModel):
    """A commune matching a postal code."""

    nom: str = Field(..., description="Commune name.")
    code_insee: str = Field(..., description="INSEE code of the commune (empty if unknown).")
    code_postal: str = Field(..., description="Postal code of the commune.")


class ResultRecord(BaseModel):
    """A single water-quality analysis result.

    Every field is always present; values the upstream did not report are null.
    """

    parametre_id: str | None = Field(None, description="Code of the measured parameter.")
    parametre_libelle: str | None = Field(None, description="Label of the measured parameter.")
    valeur: Any = Field(
        None,
        description="Measured value passed through as reported by the upstream (0 and false are kept).",
    )
    unite: str | None = Field(None, description="Unit of the measured value.")
    date_prelevement: str | None = Field(None, description="Sampling date.")
    source: Literal["Hub'Eau"] = Field("Hub'Eau", description="Data provider.")


class RateLimitInfo(BaseModel):
    window_ms: int
    max: int


class PingResponse(BaseModel):
    """Liveness payload of the ``ping`` action."""

    ok: bool = True
    ts: int = Field(..., description="Server time in epoch milliseconds.")
    rl: RateLimitInfo
