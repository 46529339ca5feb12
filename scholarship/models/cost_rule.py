from sqlalchemy import Column, Integer, String, Float

from .base import Base


class SchCostRule(Base):
    __tablename__ = "sch_cost_rules"

    # Insertion order is the matching order
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Selection keys
    level = Column(String, nullable=False)
    modality = Column(String, nullable=False)
    plan = Column(Integer, nullable=False)
    tier = Column(String, nullable=True)
    program_type = Column(String, nullable=False)

    # Average range (inclusive)
    average_min = Column(Float, nullable=False)
    average_max = Column(Float, nullable=False)

    # Pricing
    discount_percent = Column(Float, nullable=False)
    net_amount = Column(Float, nullable=False)

    origin = Column(String)
