from django.utils import timezone

from ..events import PayrollProcessed
from ..handlers import register
from .base import JournalGenerator, credit, debit

SALARY_EXPENSE = "6200"
EMPLOYER_TAX_EXPENSE = "6210"
EMPLOYER_BENEFITS_EXPENSE = "6220"
EMPLOYEE_TAX_PAYABLE = "2200"
SALARIES_PAYABLE = "2210"
EMPLOYER_TAX_PAYABLE = "2220"
EMPLOYER_BENEFITS_PAYABLE = "2230"


@register(PayrollProcessed)
class PayrollJournalGenerator(JournalGenerator):
    """
    Payroll run → salary expense against withholdings and net pay.

      Dr Salary Expense            gross
      Dr Employer Tax Expense      employer tax
      Dr Employer Benefits Expense employer benefits
        Cr Employee Tax Payable    employee tax
        Cr Employee Tax Payable    other deductions
        Cr Salaries Payable        net
        Cr Employer Tax Payable    employer tax
        Cr Employer Benefits Payable employer benefits

    net = gross − employee tax − other deductions, so it balances.
    """

    entry_type = "payroll"

    def entry_date(self, event):
        return event.payment_date or timezone.localdate()

    def description(self, event):
        return f"Payroll for period {event.period_start} to {event.period_end}"

    def reference_number(self, event):
        return event.payroll_number

    def build_legs(self, event):
        return [
            # Debits
            debit(SALARY_EXPENSE, event.gross_salary, "Gross salary expense"),
            debit(EMPLOYER_TAX_EXPENSE, event.employer_tax_amount,
                  "Employer tax expense"),
            debit(EMPLOYER_BENEFITS_EXPENSE, event.employer_benefits_amount,
                  "Employer benefits expense"),
            # Credits
            credit(EMPLOYEE_TAX_PAYABLE, event.employee_tax_amount,
                   "Employee tax withholding"),
            credit(EMPLOYEE_TAX_PAYABLE, event.other_deductions_amount,
                   "Other deductions"),
            credit(SALARIES_PAYABLE, event.net_salary,
                   "Net salary payable to employees"),
            credit(EMPLOYER_TAX_PAYABLE, event.employer_tax_amount,
                   "Employer tax payable"),
            credit(EMPLOYER_BENEFITS_PAYABLE, event.employer_benefits_amount,
                   "Employer benefits payable"),
        ]
