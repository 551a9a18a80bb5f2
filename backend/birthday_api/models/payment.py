import enum
import uuid
from sqlalchemy import Column, String, Numeric, DateTime, Index, Uuid
from birthday_api.database import Base


class Currency(str, enum.Enum):
    GHS = "GHS"
    BTC = "BTC"
    ETH = "ETH"
    SOL = "SOL"
    USDT = "USDT"
    USD = "USD"


class PaymentMethod(str, enum.Enum):
    mobile_money = "Mobile Money"
    bank_transfer = "Bank Transfer"
    crypto_binance = "Crypto (Binance)"
    crypto_okx = "Crypto (OKX)"

    @property
    def is_crypto(self) -> bool:
        return "Crypto" in self.value


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    cancelled = "cancelled"


class Exchange(str, enum.Enum):
    binance = "Binance"
    okx = "OKX"


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    email = Column(String, nullable=False, index=True)
    amount = Column(Numeric(24, 8, asdecimal=False), nullable=False)
    currency = Column(String(10), nullable=False, default=Currency.GHS.value)
    method = Column(String(30), nullable=False)
    message = Column(String(500), nullable=True)
    # NULLs never collide, so absent references are unconstrained
    reference = Column(String, unique=True, nullable=True, index=True)
    status = Column(String(20), nullable=False, default=PaymentStatus.pending.value, index=True)
    exchange = Column(String(20), nullable=True)
    crypto_symbol = Column(String, nullable=True)
    wallet_address = Column(String, nullable=True)
    tx_hash = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_payments_created_at", created_at.desc()),
    )
