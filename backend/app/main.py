from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from eqreduce.driver import SearchLimitExceeded
from eqreduce.engine import solve_equations

app = FastAPI(title="EqReduce API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class EquationRequest(BaseModel):
    equation: str
    mode: Optional[Literal["symbolic", "numerical"]] = None


class StepInfo(BaseModel):
    description: str
    expression: str
    explanation: str


class SolveResponse(BaseModel):
    equation: str
    status: str
    steps: list[StepInfo]
    final_answer: str
    verification_steps: list[StepInfo]
    validation_status: str


@app.post("/api/solve", response_model=SolveResponse)
def solve(req: EquationRequest):
    equation = req.equation.strip()
    if not equation:
        raise HTTPException(status_code=400, detail="Equation cannot be empty.")

    try:
        result = solve_equations(equation, mode=req.mode)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SearchLimitExceeded as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")

    return {
        **result,
        "status": result["summary"]["status"],
        "validation_status": result["summary"]["validation_status"],
    }
