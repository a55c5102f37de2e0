"""
Calculator tool.

A plain function tool the math tutor uses next to its agent tools.
"""

import operator
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from ..tool import Tool

OPERATIONS = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": operator.truediv,
    "power": operator.pow,
}


class CalculatorParams(BaseModel):
    """Defines the expected arguments for the calculator tool."""

    x: float = Field(description="First number to use in the operation")
    y: float = Field(description="Second number to use in the operation")
    operation: Literal["add", "subtract", "multiply", "divide", "power"] = Field(
        description="The operation to perform. Options: add, subtract, multiply, divide, power"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"operation": "add", "x": 2, "y": 3},
                {"operation": "divide", "x": 3, "y": 6},
                {"operation": "power", "x": 2, "y": 10},
            ]
        }
    }


def calculate(args: dict[str, Any]) -> dict[str, Any]:
    """Perform one arithmetic operation; failures are reported, not raised."""
    try:
        params = CalculatorParams(**args)
    except ValidationError as e:
        return {"error": f"Invalid arguments: {e.errors()[0]['msg']}"}
    try:
        result = OPERATIONS[params.operation](params.x, params.y)
    except (ZeroDivisionError, OverflowError) as e:
        return {"error": f"Error performing {params.operation}: {e}"}
    if isinstance(result, complex):
        return {"error": f"Error performing {params.operation}: result is not a real number"}
    return {"result": result}


calculator_tool = Tool(
    name="calculator",
    description="Perform basic arithmetic: add, subtract, multiply, divide or raise to a power",
    parameters=CalculatorParams,
    func=calculate,
)

__all__ = ["calculator_tool", "calculate", "CalculatorParams"]
