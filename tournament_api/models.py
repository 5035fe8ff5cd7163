"""
Pydantic data models for API request/response and error schema.
Row models keep the table column names so the frontend reads them verbatim.
"""
from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Single error detail (e.g. field-level)."""

    code: str = Field(..., description="Error code or field name")
    message: str = Field(..., description="Human-readable message")


class ErrorResponse(BaseModel):
    """Structured error response for 4xx/5xx."""

    code: str = Field(..., description="Application error code")
    message: str = Field(..., description="Human-readable summary")
    details: Optional[List[ErrorDetail]] = Field(None, description="Optional per-field or extra details")


# ----- Tournament rows -----


class Match(BaseModel):
    MatchID: int
    MatchDate: date
    Team1: str
    Team2: str
    Venue: Optional[str] = None
    Result: Optional[str] = None
    Stage: Optional[str] = None


class Standing(BaseModel):
    TeamID: int
    TeamName: str
    MatchesPlayed: int = 0
    Wins: int = 0
    Losses: int = 0
    Points: int = 0
    GoalDifference: int = 0


class PlayerStat(BaseModel):
    PlayerID: int
    PlayerName: str
    Team: Optional[str] = None
    Matches: int = 0
    Runs: int = 0
    Wickets: int = 0
    Catches: int = 0


# Max lengths match the VARCHAR columns
TEAM_MAX_LENGTH = 100
STAGE_MAX_LENGTH = 50


class MatchCreate(BaseModel):
    """Body for POST /api/match. Required fields are checked by the service so a
    missing field is a 400 with the field names, not a schema error."""

    MatchDate: Optional[date] = None
    Team1: Optional[str] = Field(None, max_length=TEAM_MAX_LENGTH)
    Team2: Optional[str] = Field(None, max_length=TEAM_MAX_LENGTH)
    Venue: Optional[str] = Field(None, max_length=TEAM_MAX_LENGTH)
    Stage: Optional[str] = Field(None, max_length=STAGE_MAX_LENGTH)


class MatchCreated(BaseModel):
    MatchID: int
    message: str = "Match created"


# ----- Health / ops -----


class HealthResponse(BaseModel):
    status: str = Field(..., description="healthy or degraded")
    check: str = "ready"
    role: str
    region: str
    database: str = Field(..., description="connected or disconnected")
    read_only: bool
    writable: bool
    error: Optional[str] = None


class LiveResponse(BaseModel):
    status: str = "ok"
    check: str = "live"
    role: str
    region: str


class DebugResponse(BaseModel):
    service: str
    version: str
    role: str
    region: str
    process: Dict[str, object]
    database: Dict[str, object]
    readiness: Dict[str, object]
    environment: Dict[str, str]
