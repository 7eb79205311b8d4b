import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .exceptions import StoreError, ValidationError
from .models import BalanceResponse, CreditRequest, DebitRequest, TransactionResponse
from .service import RewardsService, round_points
from .store import LedgerStore

logger = logging.getLogger(__name__)

router = APIRouter()


def create_app(service: Optional[RewardsService] = None) -> FastAPI:
    """
    Build the HTTP app. A service passed in is used as-is and left open;
    otherwise one is opened for the app's lifespan and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if service is not None:
            yield
            return
        owned = RewardsService(LedgerStore(get_settings().database_url))
        logger.info("Rewards store opened at %s", owned.store.database_url)
        app.state.service = owned
        try:
            yield
        finally:
            owned.close()

    app = FastAPI(
        title="Rewards Tracker API",
        description="Customer loyalty points keyed by phone number",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


def get_service(request: Request) -> RewardsService:
    service = request.app.state.service
    if service is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Rewards store is not open")
    return service


def _store_unavailable(e: StoreError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.get("/health", tags=["System"])
def health_check():
    return {"status": "healthy", "service": "rewards-tracker"}


@router.post("/accounts/{phone}/credit", response_model=TransactionResponse, tags=["Points"])
def add_points(
    phone: str, request: CreditRequest, service: RewardsService = Depends(get_service)
) -> TransactionResponse:
    try:
        account = service.credit(phone, request.amount)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreError as e:
        raise _store_unavailable(e)
    return TransactionResponse(
        account=account,
        points_changed=round_points(request.amount),
        message="Points added successfully!",
    )


@router.get("/accounts/{phone}/points", response_model=BalanceResponse, tags=["Points"])
def check_points(phone: str, service: RewardsService = Depends(get_service)) -> BalanceResponse:
    try:
        points = service.query(phone)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreError as e:
        raise _store_unavailable(e)
    return BalanceResponse(
        phone=phone,
        points=points,
        is_new_customer=points == 0,
        message="New customer - No points yet" if points == 0 else f"Current points: {points}",
    )


@router.post("/accounts/{phone}/debit", response_model=TransactionResponse, tags=["Points"])
def redeem_points(
    phone: str, request: DebitRequest, service: RewardsService = Depends(get_service)
) -> TransactionResponse:
    try:
        account = service.debit(phone, request.points)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreError as e:
        raise _store_unavailable(e)
    return TransactionResponse(
        account=account,
        points_changed=-request.points,
        message="Points redeemed successfully!",
    )


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host=settings.host, port=settings.port)
