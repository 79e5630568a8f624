from decimal import Decimal

from sqlalchemy.orm import Session

from precosmart.core.security import hash_password
from precosmart.core.units import Unit
from precosmart.models.item import Item
from precosmart.models.organization import Organization
from precosmart.models.product import Product
from precosmart.models.user import User
from precosmart.services import costing_service
from precosmart.services.organization_service import create_organization


DEMO_EMAIL = "admin@demo.com"
DEMO_PASSWORD = "secret123"
DEMO_ORGANIZATION = "Padaria Demo"


def seed_demo(db: Session):
    if db.query(User).filter(User.email == DEMO_EMAIL).first():
        return
    user = User(email=DEMO_EMAIL, name="Demo", hashed_password=hash_password(DEMO_PASSWORD), active=True)
    db.add(user)
    db.commit()
    db.refresh(user)

    organization: Organization = create_organization(db, user, DEMO_ORGANIZATION)
    flour = Item(name="Farinha de trigo", unit=Unit.g.value, price=Decimal("6.50"),
                 organization_id=organization.id)
    butter = Item(name="Manteiga", unit=Unit.g.value, price=Decimal("48.00"),
                  discounted_price=Decimal("42.00"), organization_id=organization.id)
    box = Item(name="Caixa para bolo", unit=Unit.unidade.value, price=Decimal("2.30"),
               organization_id=organization.id)
    cake = Product(name="Bolo de manteiga", sale_price=Decimal("45.00"), organization_id=organization.id)
    db.add_all([flour, butter, box, cake])
    db.commit()

    costing_service.add_item_line(db, organization.id, cake.id, flour.id, 500)
    costing_service.add_item_line(db, organization.id, cake.id, butter.id, 200)
    costing_service.add_item_line(db, organization.id, cake.id, box.id, 1)
