"""API routes for the tax and mortgage calculators."""

import logging
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.calculators.errors import CalculationError, UnknownCalculatorError
from src.calculators.registry import list_rule_sets, run_calculation

logger = logging.getLogger(__name__)

router = APIRouter()


class CalculateRequest(BaseModel):
    """Request body for the /calculate endpoint.

    ``rules`` replaces the bundled rule set for this call when given.
    """

    input: dict[str, Any]
    rules: dict[str, Any] | None = None


@router.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/rules")
def rules() -> dict[str, list[dict[str, Any]]]:
    """Metadata for every bundled rule set."""
    return {"rule_sets": [meta.model_dump(mode="json") for meta in list_rule_sets()]}


@router.post("/calculate/{calculator}/{country}")
def calculate(calculator: str, country: str, body: CalculateRequest) -> JSONResponse:
    """Run one calculation and return its result."""
    try:
        result = run_calculation(calculator, country, body.input, body.rules)
    except UnknownCalculatorError as e:
        return JSONResponse(status_code=404, content={"error": str(e)})
    except CalculationError as e:
        logger.warning("Calculation %s/%s failed: %s", calculator, country, e)
        return JSONResponse(status_code=422, content={"error": str(e)})

    try:
        return JSONResponse(content=result.model_dump(mode="json"))
    except ValueError:
        # Amounts beyond float range serialize as inf, which JSON cannot carry
        logger.warning("Calculation %s/%s produced non-finite amounts", calculator, country)
        return JSONResponse(
            status_code=422, content={"error": "Result amounts are too large to represent"}
        )
