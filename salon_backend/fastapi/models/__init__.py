from salon_backend.fastapi.models.staff import Staff
from salon_backend.fastapi.models.time_entry import TimeLedgerEntry, ExitInterval, AttendanceStatus
from salon_backend.fastapi.models.payroll import PayrollRecord
from salon_backend.fastapi.models.advance import AdvancePayment, AdvanceStatus
