from .accounts import (SYSTEM_ACCOUNTS, activate_account, deactivate_account,
                       delete_account, ensure_system_accounts,
                       find_or_create_account, get_account_tree,
                       get_ancestors, get_descendants, move_account)
from .audit_helper import record_failure, record_rejected_payload
from .periods import (close_period, create_period, ensure_period_open,
                      resolve_period_for)
from .posting import (EntryHeader, LineInput, create_and_post, create_entry,
                      find_by_reference, post_entry, reject_entry,
                      reopen_entry, reverse_entry, submit_entry,
                      validate_balance)
