from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from storefront.application.customers import CustomerService
from storefront.application.schemas import CustomerCreate, CustomerRead
from storefront.infrastructure.db import get_db

router = APIRouter(prefix="/api/customers", tags=["customers"])

@router.post("")
def create_customer(payload: CustomerCreate, db: Session = Depends(get_db)):
    customer = CustomerService(db).create(payload)
    return {"id": customer.id, "message": "Customer created successfully"}

@router.get("/{email}", response_model=CustomerRead)
def get_customer(email: str, db: Session = Depends(get_db)):
    customer = CustomerService(db).get_by_email(email)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer
