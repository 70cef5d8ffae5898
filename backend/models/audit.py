from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base

# One audit entry per login, back-office write, catalog import or checkout
class AuditLog(Base):
    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Who did it; kept as NULL once the account is removed
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # What was done, e.g. PRODUCT_UPDATE on products/42
    action = Column(String(50), nullable=False, index=True)
    resource = Column(String(50), nullable=False, index=True)
    resource_id = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default="SUCCESS")

    ip = Column(String(64), nullable=True)
    meta = Column(JSON, nullable=True)

    user = relationship("User")
