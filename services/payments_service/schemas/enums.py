import enum


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"


class BasePlan(str, enum.Enum):
    FREE = "free"
    PREMIUM = "premium"
