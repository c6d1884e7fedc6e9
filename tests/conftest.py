"""Shared fixtures for the invoice engine tests."""
import pytest

from invoice_engine.config import EngineSettings
from invoice_engine.schemas import Company, Party


@pytest.fixture
def seller():
    return Company(name="Acme Traders", gstin="27ABCDE1234F1Z5", address_state="Maharashtra")


@pytest.fixture
def unregistered_seller():
    return Company(name="Corner Shop", address_state="Maharashtra")


@pytest.fixture
def local_buyer():
    return Party(name="Local Buyer", state="Maharashtra")


@pytest.fixture
def outstation_buyer():
    return Party(name="Outstation Buyer", state="Gujarat")


@pytest.fixture
def widget_tx():
    return {
        "invoiceNumber": "INV-1001",
        "date": "2024-03-15",
        "products": [
            {"name": "Widget", "quantity": 2, "pricePerUnit": 100, "gstPercentage": 18, "hsn": "8471"},
        ],
    }


@pytest.fixture
def settings():
    return EngineSettings(default_page_size=40, assume_interstate_when_unknown=True)
