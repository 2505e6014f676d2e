from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from storefront.domain.errors import ConflictError
from storefront.domain.models import Customer
from .auth import normalize_email
from .schemas import CustomerCreate

class CustomerService:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str):
        return self.db.execute(
            select(Customer).where(Customer.email == email.strip().lower())
        ).scalar_one_or_none()

    def create(self, data: CustomerCreate) -> Customer:
        email = normalize_email(data.email)
        if self.get_by_email(email) is not None:
            raise ConflictError(f"Customer with email {email} already exists")
        obj = Customer(
            email=email,
            name=data.name,
            phone=data.phone,
            address=data.address,
            city=data.city,
            state=data.state,
            postal_code=data.postal_code,
            country=data.country,
        )
        self.db.add(obj)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"Customer with email {email} already exists")
        self.db.refresh(obj)
        return obj
