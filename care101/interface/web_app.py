"""Mini README: FastAPI REST surface for the Care101 doctor portal.

Structure:
    * create_application - application factory wiring routes to services.
    * Request models - pydantic bodies for hospital, surgery record and entry
      creation.

Authentication happens upstream; the authenticated doctor arrives in the
``X-Doctor-Id`` header. Missing documents map to 404, plan limit denials to
403 with an upgrade hint, and malformed payloads to 400.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, Header, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..configuration import Care101Settings, get_settings
from ..errors import NotFoundError, QuotaExceededError
from ..finance import FinanceManager, FinanceSummaryService
from ..logging_utils import get_logger
from ..records import SurgeryRecordManager
from ..store import InMemoryStore
from ..subscriptions import PlanLimitGuard, SubscriptionManager

LOGGER = get_logger(__name__)


class HospitalPayload(BaseModel):
    name: str
    whtEnabled: bool = False


class SurgeryRecordPayload(BaseModel):
    name: Optional[str] = None
    surgeryCardImage: Optional[str] = None
    nic: Optional[str] = None
    hospital: Optional[str] = None


class EntryPayload(BaseModel):
    notes: Optional[str] = None
    images: List[str] = Field(default_factory=list)


def _http_error(error: Exception) -> HTTPException:
    """Translate service exceptions into HTTP errors."""

    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, QuotaExceededError):
        return HTTPException(
            status_code=403,
            detail={"msg": error.message, "upgrade": error.upgrade_available},
        )
    return HTTPException(status_code=400, detail=str(error))


def create_application(
    store: Optional[InMemoryStore] = None,
    settings: Optional[Care101Settings] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    app = FastAPI(title="Care101 Doctor Services", version="0.1.0")

    settings = settings or get_settings()
    store = store if store is not None else InMemoryStore.with_demo_data()
    guard = PlanLimitGuard(store, settings.plan_quotas())
    finance = FinanceManager(store, guard)
    summaries = FinanceSummaryService(store, wht_rate=settings.wht_rate)
    surgery_records = SurgeryRecordManager(store, guard)
    subscriptions = SubscriptionManager(store, period_days=settings.premium_period_days)

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok", "environment": settings.environment})

    @app.get("/finance")
    async def list_finance(x_doctor_id: str = Header(...)) -> JSONResponse:
        """Return per-hospital income summaries for the doctor."""

        try:
            hospital_summaries = summaries.hospital_summaries(x_doctor_id)
        except NotFoundError as error:
            raise _http_error(error) from error
        payload = [summary.as_dict() for summary in hospital_summaries]
        return JSONResponse(payload)

    @app.post("/finance/add-hospital")
    async def add_hospital(body: HospitalPayload, x_doctor_id: str = Header(...)) -> JSONResponse:
        try:
            hospital = finance.add_hospital(x_doctor_id, body.name, body.whtEnabled)
        except (NotFoundError, QuotaExceededError, ValueError) as error:
            raise _http_error(error) from error
        return JSONResponse(hospital.as_dict())

    @app.get("/finance/{hospital_id}")
    async def get_hospital(hospital_id: str, x_doctor_id: str = Header(...)) -> JSONResponse:
        try:
            hospital = finance.get_hospital(x_doctor_id, hospital_id)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse(hospital.as_dict())

    @app.delete("/finance/{hospital_id}")
    async def delete_hospital(hospital_id: str, x_doctor_id: str = Header(...)) -> JSONResponse:
        try:
            finance.delete_hospital(x_doctor_id, hospital_id)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse({"msg": "Deleted"})

    @app.post("/finance/{hospital_id}/add-record")
    async def add_income_record(
        hospital_id: str,
        body: Dict[str, Any] = Body(...),
        x_doctor_id: str = Header(...),
    ) -> JSONResponse:
        """Prepend a channeling or surgical record to the ledger."""

        try:
            finance.add_record(x_doctor_id, hospital_id, body)
            hospital = finance.get_hospital(x_doctor_id, hospital_id)
        except (NotFoundError, ValueError) as error:
            raise _http_error(error) from error
        return JSONResponse(hospital.as_dict())

    @app.delete("/finance/{hospital_id}/record/{record_id}")
    async def delete_income_record(
        hospital_id: str, record_id: str, x_doctor_id: str = Header(...)
    ) -> JSONResponse:
        try:
            hospital = finance.delete_record(x_doctor_id, hospital_id, record_id)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse(hospital.as_dict())

    @app.get("/surgery-records")
    async def list_surgery_records(x_doctor_id: str = Header(...)) -> JSONResponse:
        records = surgery_records.list_records(x_doctor_id)
        return JSONResponse([record.as_dict() for record in records])

    @app.post("/surgery-records/create")
    async def create_surgery_record(
        body: SurgeryRecordPayload, x_doctor_id: str = Header(...)
    ) -> JSONResponse:
        try:
            record = surgery_records.create_record(
                x_doctor_id,
                name=body.name or "",
                surgery_card_image=body.surgeryCardImage or "",
                nic=body.nic,
                hospital=body.hospital,
            )
        except (NotFoundError, QuotaExceededError, ValueError) as error:
            raise _http_error(error) from error
        return JSONResponse(record.as_dict())

    @app.get("/surgery-records/{record_id}")
    async def get_surgery_record(record_id: str, x_doctor_id: str = Header(...)) -> JSONResponse:
        try:
            record = surgery_records.get_record(x_doctor_id, record_id)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse(record.as_dict())

    @app.delete("/surgery-records/{record_id}")
    async def delete_surgery_record(record_id: str, x_doctor_id: str = Header(...)) -> JSONResponse:
        try:
            surgery_records.delete_record(x_doctor_id, record_id)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse({"msg": "Record Deleted"})

    @app.post("/surgery-records/{record_id}/entry")
    async def add_progress_entry(
        record_id: str, body: EntryPayload, x_doctor_id: str = Header(...)
    ) -> JSONResponse:
        try:
            surgery_records.add_entry(x_doctor_id, record_id, notes=body.notes, images=body.images)
            record = surgery_records.get_record(x_doctor_id, record_id)
        except (NotFoundError, QuotaExceededError) as error:
            raise _http_error(error) from error
        return JSONResponse(record.as_dict())

    @app.get("/doctor/dashboard-stats")
    async def dashboard_stats(x_doctor_id: str = Header(...)) -> JSONResponse:
        try:
            stats = summaries.dashboard_stats(x_doctor_id)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse(stats.as_dict())

    @app.put("/payments/confirm-upgrade")
    async def confirm_upgrade(x_doctor_id: str = Header(...)) -> JSONResponse:
        try:
            doctor = subscriptions.confirm_upgrade(x_doctor_id)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse(
            {"msg": "Plan upgraded successfully", "subscription": doctor.subscription.as_dict()}
        )

    @app.put("/payments/cancel-subscription")
    async def cancel_subscription(x_doctor_id: str = Header(...)) -> JSONResponse:
        try:
            doctor = subscriptions.cancel_subscription(x_doctor_id)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse(
            {
                "msg": "Subscription cancelled. Access remains until billing cycle ends.",
                "subscription": doctor.subscription.as_dict(),
            }
        )

    LOGGER.debug("Care101 application created with %s routes", len(app.routes))
    return app
