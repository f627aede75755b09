from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Organizational role, ordered from the top of the hierarchy down."""

    ADMIN = "admin"
    MANAGER = "manager"
    BDM = "businessdevelopmentmanager"
    BDE = "businessdevelopmentexecutive"

    @property
    def code_prefix(self) -> str:
        return {
            Role.ADMIN: "AD",
            Role.MANAGER: "M",
            Role.BDM: "BDM",
            Role.BDE: "BDE",
        }[self]


class ReportStatus(str, Enum):
    """Approval state shared by sales and verification reports."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AttendanceStatus(str, Enum):
    """Derived display status for one employee on one day."""

    ABSENT = "absent"
    LOGGED_IN = "logged_in"
    PRESENT = "present"

    @property
    def label(self) -> str:
        return {
            AttendanceStatus.ABSENT: "Absent",
            AttendanceStatus.LOGGED_IN: "Logged In",
            AttendanceStatus.PRESENT: "Present",
        }[self]


class PaymentMode(str, Enum):
    UPI = "upi"
    NEFT = "neft"
    IMPS = "imps"
    CHEQUE = "cheque"
    RTGS = "rtgs"


class ProductType(str, Enum):
    """Product families a merchant can show interest in during a visit."""

    SOUNDBOX = "soundbox"
    MERCHANT = "merchant"
    ANDROID_SWIPE = "android_swipe_machine"
    ANDROID_PRINTER = "android_printer_swipe_machine"
    DISTRIBUTOR = "distributor"
    MATM = "matm"
