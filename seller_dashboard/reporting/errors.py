"""
Reporting Errors

Error taxonomy of the seller reporting layer. Every error carries a stable
code, an English and an Arabic message and the HTTP status the API layer
answers with.
"""

from typing import Any, Dict, Iterable, Optional


class ReportingError(Exception):
    """Base class for errors surfaced to dashboard callers"""

    code = "REPORTING_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str,
        message_ar: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.message_ar = message_ar
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Error envelope returned by the API"""
        return {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "messageAr": self.message_ar,
                "details": self.details,
            },
        }


class SellerNotFound(ReportingError):
    """The seller id does not resolve to a seller record"""

    code = "SELLER_NOT_FOUND"
    status_code = 404

    def __init__(self, seller_id: Any):
        super().__init__(
            "Seller not found",
            "البائع غير موجود",
            {"sellerId": str(seller_id)},
        )
        self.seller_id = seller_id


class InvalidPeriod(ReportingError):
    """Unrecognized period selector or an inverted custom range"""

    code = "INVALID_PERIOD"
    status_code = 400

    def __init__(self, period: Any, allowed: Iterable[str] = ()):
        allowed = list(allowed)
        details: Dict[str, Any] = {"period": str(period)}
        if allowed:
            details["allowed"] = allowed
        super().__init__(
            f"Invalid reporting period: {period}",
            "فترة التقرير غير صحيحة",
            details,
        )
        self.period = period


class DataFetchFailure(ReportingError):
    """A read query failed or timed out; safe to retry the whole request"""

    code = "DATA_FETCH_FAILURE"
    status_code = 503

    def __init__(self, fetch: str, reason: str):
        super().__init__(
            f"Failed to fetch {fetch}: {reason}",
            "فشل في جلب بيانات لوحة التحكم",
            {"fetch": fetch},
        )
        self.fetch = fetch


class MalformedRecord(ReportingError):
    """A daily metric record violates the non-negative / dated invariants"""

    code = "MALFORMED_RECORD"
    status_code = 422

    def __init__(self, reason: str, record: Any = None):
        details: Dict[str, Any] = {"reason": reason}
        if record is not None:
            details["record"] = repr(record)
        super().__init__(
            f"Malformed metric record: {reason}",
            "سجل إحصائيات غير صالح",
            details,
        )


class InvalidEvent(ReportingError):
    """Unknown event type or bad event metadata on the tracking path"""

    code = "INVALID_EVENT"
    status_code = 400

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid tracking event: {reason}",
            "حدث تتبع غير صالح",
            {"reason": reason},
        )
