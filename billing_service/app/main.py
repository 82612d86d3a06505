import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.database import facility_engine, Base
from shared.exception_handler import setup_exception_handlers
from .billing_exception_handler import setup_billing_exception_handlers
from .models.space_sites import orgs
from .models.leasing_tenants import leases, tenants
from .models.financials import invoices
from .router.financials import invoice_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables
    Base.metadata.create_all(bind=facility_engine)
    yield


app = FastAPI(title="Billing Service API", lifespan=lifespan)

# Allow requests from your React app
origins = [
    "http://localhost:8080",
    "http://127.0.0.1:8002"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)
setup_billing_exception_handlers(app)

# Include routers
app.include_router(invoice_router.router)
