from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from session_pricing import __version__
from session_pricing.engine import SessionInput
from session_pricing.engine.errors import DomainError, ErrorCode
from session_pricing.api.checkout_api import router as checkout_router
from session_pricing.api.schemas import QuoteRequest
from session_pricing.api.state import engine

app = FastAPI(
    title="Session Pricing API",
    description="Quotation engine for seating sessions and checkout",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include checkout API
app.include_router(checkout_router)

ERROR_STATUS = {
    ErrorCode.INVALID_INPUT: 422,
    ErrorCode.VISIT_NOT_FOUND: 404,
    ErrorCode.PAYMENT_REJECTED: 409,
    ErrorCode.CONFIGURATION_ERROR: 500,
}


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(status_code=ERROR_STATUS.get(exc.code, 400), content=exc.to_dict())


@app.get("/")
async def root():
    return {"status": "online", "message": "Session Pricing API Active"}


@app.get("/plans")
async def list_plans():
    return {
        "plans": engine.plans.to_dict(),
        "rates": {
            "nomination_unit_price": engine.rates.nomination_unit_price,
            "inhouse_unit_price": engine.rates.inhouse_unit_price,
            "house_fee": engine.rates.house_fee,
            "single_charge": engine.rates.single_charge,
            "service_rate": str(engine.rates.service_rate),
            "tax_rate": str(engine.rates.tax_rate),
        },
    }


@app.post("/quote")
async def calculate_quote(req: QuoteRequest):
    session = SessionInput(
        plan=req.plan,
        start_at=req.start_at,
        end_at=req.end_at,
        add_ons=req.add_ons.to_domain(),
    )
    return engine.quote(session).to_dict()
