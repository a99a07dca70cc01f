from salon_backend.fastapi.schemas.staff import StaffCreate
from salon_backend.fastapi.schemas.time_entry import (
    CheckInRequest, CheckOutRequest, StartExitRequest, EndExitRequest,
    PlaceholderCreate, ExitIntervalRead, TimeLedgerEntryRead,
    TimeLedgerListResponse, LiveEstimate, OvertimeTotal
)
from salon_backend.fastapi.schemas.payroll import (
    PayrollProcessRequest, MarkPaidRequest, PayrollRead, PayrollListResponse
)
from salon_backend.fastapi.schemas.advance import (
    AdvanceCreate, AdvanceStatusUpdate, AdvanceRead, AdvanceListResponse
)
