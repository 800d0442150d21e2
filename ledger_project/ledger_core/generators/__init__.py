# importing the modules registers each generator with ledger_core.handlers
from .base import JournalGenerator  # noqa: F401
from .inventory import StockMovementJournalGenerator  # noqa: F401
from .payroll import PayrollJournalGenerator  # noqa: F401
from .procurement import GoodsReceiptJournalGenerator  # noqa: F401
