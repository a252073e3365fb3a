from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# --- Geography ---

class Coordinate(BaseModel):
    latitude: float
    longitude: float

    def as_pair(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


# --- N2YO payloads (field names match the upstream JSON) ---

class N2YOInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    satid: int | None = None
    satname: str | None = None
    transactionscount: int | None = None
    passescount: int | None = None


class SatellitePosition(BaseModel):
    model_config = ConfigDict(extra="allow")

    satlatitude: float
    satlongitude: float
    timestamp: int | None = None
    sataltitude: float | None = None
    azimuth: float | None = None
    elevation: float | None = None
    ra: float | None = None
    dec: float | None = None
    eclipsed: bool | None = None

    def as_pair(self) -> tuple[float, float]:
        return (self.satlatitude, self.satlongitude)


class PositionsResponse(BaseModel):
    info: N2YOInfo | None = None
    positions: list[SatellitePosition] = []


class VisiblePass(BaseModel):
    model_config = ConfigDict(extra="allow")

    startUTC: int = Field(description="Pass start, unix seconds")
    duration: float = Field(description="Visible duration, seconds")
    endUTC: int | None = None
    maxEl: float | None = None
    mag: float | None = None
    startAz: float | None = None
    startAzCompass: str | None = None
    endAz: float | None = None
    endAzCompass: str | None = None


class VisualPassesResponse(BaseModel):
    info: N2YOInfo | None = None
    passes: list[VisiblePass] = []


# --- Client output ---

class PassSummary(BaseModel):
    start_utc: int
    duration_min: int
    when: str
    text: str


class TrackingReport(BaseModel):
    observer: Coordinate | None = None
    iss: Coordinate | None = None
    place: str | None = None
    next_pass: PassSummary | None = None
    output: list[str] = []


# --- API responses ---

class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
