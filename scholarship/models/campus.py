from sqlalchemy import Column, Integer, String, JSON

from .base import Base


class SchCampus(Base):
    __tablename__ = "sch_campuses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    campus_key = Column(String, nullable=False, unique=True)  # campus name or "ONLINE"
    tier = Column(String, nullable=True)

    # level -> plan -> {net_price, available_discounts}
    offerings = Column(JSON)
    # category -> [{code, description, amount}]
    extra_charges = Column(JSON)
    # campus listings this campus appears in (e.g. "salud_presencial")
    listing_keys = Column(JSON)

    data_version = Column(String)
