# eom/models/employee.py
from sqlalchemy import Column, Integer, String
from eom.database import Base

ROLE_PEER = "user_unit"
ROLE_UNIT_ADMIN = "admin_unit"
ROLE_CENTRAL_ADMIN = "admin_pusat"

CATEGORY_ASN = "ASN"
CATEGORY_NON_ASN = "Non ASN"
EMPLOYEE_CATEGORIES = (CATEGORY_ASN, CATEGORY_NON_ASN)

class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=True)
    email = Column(String, unique=True, nullable=False)
    role = Column(String, nullable=False, default=ROLE_PEER)  # user_unit, admin_unit, admin_pusat
    employee_category = Column(String, nullable=False, default=CATEGORY_ASN)  # ASN, Non ASN
    work_unit_id = Column(Integer, nullable=True)
