from pydantic import BaseModel


class RecognitionResponse(BaseModel):
    """Response model for the image recognition endpoint"""
    text: str


class ErrorResponse(BaseModel):
    """Error body returned for every failed recognition request"""
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
