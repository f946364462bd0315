from pydantic import BaseModel, Field
from typing import Any, List, Optional


class DiagnosisIn(BaseModel):
    # No type checks: values are forwarded verbatim, the complaint is str()-ed by the classifier.
    complaint: Any = None
    age: Any = None
    systolic_bp: Any = None
    diastolic_bp: Any = None
    temperature_c: Any = None
    weight_kg: Any = None
    heart_rate_bpm: Any = None
    resp_rate_cpm: Any = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "complaint": "dog bite on left hand",
                "age": 34,
                "systolic_bp": "120",
                "diastolic_bp": "80",
                "temperature_c": "36.8",
            }
        }
    }


class Prediction(BaseModel):
    diagnosis: str
    probability: float
    explanation: Optional[str] = None


class DiagnosisOut(BaseModel):
    top3: List[Prediction] = Field(default_factory=list)
    # bite path only
    category: Optional[str] = None
    category_confidence: Optional[float] = None
    # opaque upstream payloads
    treatment: Optional[Any] = None
    urgency_level: Optional[Any] = None


class ErrorOut(BaseModel):
    error: str
