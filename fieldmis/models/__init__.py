"""Domain models for the field MIS feed pipeline.

Every entity is derived from spreadsheet rows at run time; nothing here is
persisted.
"""

from .asset import AssetRecord, ClusterStock
from .attendance import AttendanceRecord
from .beneficiary import Beneficiary
from .error_record import ErrorRecord
from .household import BaselineHousehold, ContributionTransaction
from .mis import MISComponent
from .raw_record import RawRecord, normalize_header
from .registry import MaintenanceBill, MediaEntry
from .report_result import FeedStat, FeedStatus, ReportResult

__all__ = [
    # Feed rows
    "RawRecord",
    "normalize_header",
    # Report entities
    "AssetRecord",
    "AttendanceRecord",
    "BaselineHousehold",
    "Beneficiary",
    "ClusterStock",
    "ContributionTransaction",
    "MISComponent",
    "MaintenanceBill",
    "MediaEntry",
    # Run results
    "ErrorRecord",
    "FeedStat",
    "FeedStatus",
    "ReportResult",
]
