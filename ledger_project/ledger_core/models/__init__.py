from .account import Account
from .failure import PostingFailure
from .journal import JournalEntry, JournalEntryLine, JournalSequence
from .period import FiscalPeriod
from .tenant import Tenant
