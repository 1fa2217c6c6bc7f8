import pytest

from farmshare import create_app
from farmshare.extensions import db
from farmshare.models import Equipment
from farmshare.services import EquipmentService, FarmerService


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def catalog(app):
    EquipmentService.seed_sample_equipment()
    return Equipment.query.order_by(Equipment.id.asc()).all()


@pytest.fixture
def tractor(catalog):
    return catalog[0]


@pytest.fixture
def farmer(app):
    farmer, _ = FarmerService.login_or_register("Asha", "9999999999")
    return farmer


@pytest.fixture
def other_farmer(app):
    farmer, _ = FarmerService.login_or_register("Ravi", "8888888888")
    return farmer
