"""
FastAPI Backend for the bilirubin calculator
Thin presentation layer over the threshold engine and recommendation classifier
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Literal, Optional, List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator, model_validator

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from src.core.config import config
from src.core.bilirubin import (
    EvaluationInput,
    InvalidCategoryError,
    evaluate,
    get_engine,
    threshold_for,
)
from src.core.bilirubin.age import postnatal_age_hours
from src.core.bilirubin.engine import parse_category
from src.utils.preprocessing import parse_numeric_input, step_value
from src.utils.report import format_age

logging.basicConfig(
    level=config.logging_config['level'],
    format=config.logging_config['format'],
)
logger = logging.getLogger("bilirubin")

app = FastAPI(title="Neonatal Bilirubin Calculator API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api_config['cors_origins'],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    status: str
    timestamp: str


class EvaluateRequest(BaseModel):
    """Form fields; either postnatal_age_hours or birth_time must be given for a result"""
    gestational_age_weeks: Optional[int] = None
    postnatal_age_hours: Optional[float] = Field(default=None, ge=0)
    birth_time: Optional[datetime] = None
    lab_time: Optional[datetime] = None
    total_bilirubin: Optional[float] = None
    risk_factors_present: bool = config.calculator_config['default_risk_factors']
    kernicterus_signs_present: bool = False

    @field_validator("total_bilirubin", mode="before")
    @classmethod
    def clamp_bilirubin(cls, value):
        limits = config.input_config['bilirubin']
        if value is None or value == "":
            return None
        return parse_numeric_input(
            value, minimum=limits['min'], maximum=limits['max'], is_float=True
        )

    @model_validator(mode="after")
    def check_time_zones(self):
        if self.birth_time is not None and self.lab_time is not None:
            if (self.birth_time.tzinfo is None) != (self.lab_time.tzinfo is None):
                raise ValueError(
                    "birth_time and lab_time must both carry a UTC offset or both omit it"
                )
        return self

    def age_hours(self) -> Optional[float]:
        if self.postnatal_age_hours is not None:
            return self.postnatal_age_hours
        if self.birth_time is not None:
            return postnatal_age_hours(self.birth_time, self.lab_time)
        return None


class ThresholdRequest(BaseModel):
    treatment_category: str
    gestational_age_weeks: int
    postnatal_age_hours: float = Field(ge=0)
    risk_factors_present: bool = False
    total_bilirubin: Optional[float] = None


class ThresholdResponse(BaseModel):
    threshold: Optional[float]
    needs_action: bool
    status: str
    message: str


class StepRequest(BaseModel):
    """One wheel or drag tick on a numeric field"""
    field: Literal["bilirubin", "hour"]
    value: Optional[str] = None
    increase: bool = True


class StepResponse(BaseModel):
    field: str
    value: float


class CardsResponse(BaseModel):
    phototherapy: float
    escalation: float
    exchange: float


class RecommendationResponse(BaseModel):
    tier: str
    severity: str
    title: str
    actions: List[str]
    detail: str
    difference: Optional[float] = None


class EvaluateResponse(BaseModel):
    postnatal_age_hours: Optional[float]
    age_display: str
    recommendation: Optional[RecommendationResponse]
    cards: Optional[CardsResponse]
    timestamp: str


@app.on_event("startup")
async def startup_event():
    """Load reference tables on startup"""
    logger.info("Starting bilirubin calculator API...")
    get_engine()
    logger.info("Bilirubin calculator API ready")


@app.exception_handler(InvalidCategoryError)
async def invalid_category_handler(request: Request, exc: InvalidCategoryError):
    logger.warning("Rejected request to %s: %s", request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat()
    )


@app.post("/api/evaluate", response_model=EvaluateResponse)
async def evaluate_endpoint(request: EvaluateRequest):
    """Thresholds and recommendation for one set of form fields"""
    age = request.age_hours()
    evaluation = evaluate(
        EvaluationInput(
            gestational_age_weeks=request.gestational_age_weeks,
            postnatal_age_hours=age,
            risk_factors_present=request.risk_factors_present,
            kernicterus_signs_present=request.kernicterus_signs_present,
            total_bilirubin=request.total_bilirubin,
        )
    )

    recommendation = None
    if evaluation.recommendation is not None:
        rec = evaluation.recommendation
        recommendation = RecommendationResponse(
            tier=rec.tier.value,
            severity=rec.severity.value,
            title=rec.title,
            actions=rec.actions,
            detail=rec.detail,
            difference=rec.difference,
        )

    cards = None
    if evaluation.cards is not None:
        cards = CardsResponse(
            phototherapy=evaluation.cards.phototherapy,
            escalation=evaluation.cards.escalation,
            exchange=evaluation.cards.exchange,
        )

    return EvaluateResponse(
        postnatal_age_hours=age,
        age_display=format_age(
            None if age is None else int(age),
            localized=config.input_config['localized_digits'],
        ),
        recommendation=recommendation,
        cards=cards,
        timestamp=datetime.now().isoformat(),
    )


@app.post("/api/threshold", response_model=ThresholdResponse)
async def threshold_endpoint(request: ThresholdRequest):
    """Single phototherapy or exchange threshold"""
    result = threshold_for(
        EvaluationInput(
            gestational_age_weeks=request.gestational_age_weeks,
            postnatal_age_hours=request.postnatal_age_hours,
            risk_factors_present=request.risk_factors_present,
            total_bilirubin=request.total_bilirubin,
            treatment_category=parse_category(request.treatment_category),
        )
    )
    return ThresholdResponse(
        threshold=result.threshold,
        needs_action=result.needs_action,
        status=result.status.value,
        message=result.message,
    )


@app.post("/api/step", response_model=StepResponse)
async def step_endpoint(request: StepRequest):
    """Next value of a numeric field after one step up or down"""
    limits = config.input_config[request.field]
    current = parse_numeric_input(
        request.value,
        minimum=limits['min'],
        maximum=limits['max'],
        is_float=limits['is_float'],
    )
    value = step_value(
        current,
        request.increase,
        step=limits['step'],
        minimum=limits['min'],
        maximum=limits['max'],
        is_float=limits['is_float'],
        start_value=limits['start_value'],
    )
    return StepResponse(field=request.field, value=value)


if __name__ == "__main__":
    import uvicorn
    logger.info(
        "Starting bilirubin calculator API on http://localhost:%d",
        config.api_config['port'],
    )
    uvicorn.run(
        app,
        host=config.api_config['host'],
        port=config.api_config['port'],
        log_level="info",
    )
