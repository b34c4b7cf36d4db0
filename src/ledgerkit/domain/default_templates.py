"""Auto-posting templates shipped with the default chart."""

from ledgerkit.domain import default_chart as chart
from ledgerkit.domain.entities import (
    AmountType,
    DynamicAccount,
    FixedAccount,
    JournalEntryTemplate,
    LineSide,
    TemplateLine,
    TriggerType,
)

DR = LineSide.DEBIT
CR = LineSide.CREDIT

TREASURY = DynamicAccount("treasury_account")
EXPENSE_ACCOUNT = DynamicAccount("expense_account")


def _lines(*rows) -> tuple[TemplateLine, ...]:
    return tuple(
        TemplateLine(
            line_number=number,
            account=account,
            side=side,
            amount_type=amount_type,
            description=description,
        )
        for number, (account, side, amount_type, description) in enumerate(rows, start=1)
    )


DEFAULT_TEMPLATES: list[JournalEntryTemplate] = [
    JournalEntryTemplate(
        code="SALE_INVOICE_A",
        name="Sale invoice with VAT breakdown",
        trigger_type=TriggerType.SALE_INVOICE,
        is_active=True,
        lines=_lines(
            (FixedAccount(chart.RECEIVABLES), DR, AmountType.TOTAL, "Customer balance"),
            (FixedAccount(chart.SALES), CR, AmountType.SUBTOTAL, "Net sales"),
            (FixedAccount(chart.VAT_DEBIT), CR, AmountType.TAX, "VAT output"),
        ),
    ),
    JournalEntryTemplate(
        code="SALE_INVOICE_B",
        name="Sale invoice, tax included",
        trigger_type=TriggerType.SALE_INVOICE,
        is_active=True,
        lines=_lines(
            (FixedAccount(chart.RECEIVABLES), DR, AmountType.TOTAL, "Customer balance"),
            (FixedAccount(chart.SALES), CR, AmountType.TOTAL, "Sales"),
        ),
    ),
    JournalEntryTemplate(
        code="PURCHASE_INVOICE",
        name="Purchase invoice approval",
        trigger_type=TriggerType.PURCHASE_INVOICE,
        is_active=True,
        lines=_lines(
            (FixedAccount(chart.MERCHANDISE), DR, AmountType.SUBTOTAL, "Goods purchased"),
            (FixedAccount(chart.VAT_CREDIT), DR, AmountType.TAX, "VAT input"),
            (FixedAccount(chart.TAX_CREDITS), DR, AmountType.PERCEPTION, "Perceptions suffered"),
            (FixedAccount(chart.SUPPLIERS), CR, AmountType.TOTAL, "Supplier balance"),
        ),
    ),
    JournalEntryTemplate(
        code="CUSTOMER_RECEIPT",
        name="Customer receipt",
        trigger_type=TriggerType.CUSTOMER_RECEIPT,
        is_active=True,
        lines=_lines(
            (TREASURY, DR, AmountType.NET_PAYMENT, "Funds received"),
            (FixedAccount(chart.TAX_CREDITS), DR, AmountType.RETENTION, "Withholdings suffered"),
            (FixedAccount(chart.RECEIVABLES), CR, AmountType.TOTAL, "Customer balance"),
        ),
    ),
    JournalEntryTemplate(
        code="SUPPLIER_PAYMENT",
        name="Supplier payment",
        trigger_type=TriggerType.SUPPLIER_PAYMENT,
        is_active=True,
        lines=_lines(
            (FixedAccount(chart.SUPPLIERS), DR, AmountType.TOTAL, "Supplier balance"),
            (TREASURY, CR, AmountType.NET_PAYMENT, "Funds paid"),
            (FixedAccount(chart.WITHHOLDINGS_PAYABLE), CR, AmountType.RETENTION, "Withholdings applied"),
        ),
    ),
    JournalEntryTemplate(
        code="PURCHASE_CREDIT_NOTE",
        name="Supplier credit note (return)",
        trigger_type=TriggerType.CREDIT_NOTE,
        is_active=True,
        lines=_lines(
            (FixedAccount(chart.SUPPLIERS), DR, AmountType.TOTAL, "Supplier balance"),
            (FixedAccount(chart.MERCHANDISE), CR, AmountType.SUBTOTAL, "Goods returned"),
            (FixedAccount(chart.VAT_CREDIT), CR, AmountType.TAX, "VAT input reversed"),
        ),
    ),
    JournalEntryTemplate(
        code="SALARY_PAYMENT",
        name="Salary payment",
        trigger_type=TriggerType.SALARY_PAYMENT,
        is_active=True,
        lines=_lines(
            (FixedAccount(chart.SALARIES), DR, AmountType.TOTAL, "Gross salaries"),
            (FixedAccount(chart.SOCIAL_SECURITY_PAYABLE), CR, AmountType.RETENTION, "Employee deductions"),
            (TREASURY, CR, AmountType.NET_PAYMENT, "Net pay"),
        ),
    ),
    JournalEntryTemplate(
        code="LOAN_DISBURSEMENT",
        name="Bank loan disbursement",
        trigger_type=TriggerType.LOAN_DISBURSEMENT,
        is_active=True,
        lines=_lines(
            (TREASURY, DR, AmountType.TOTAL, "Loan proceeds"),
            (FixedAccount(chart.BANK_LOANS), CR, AmountType.TOTAL, "Loan principal"),
        ),
    ),
    JournalEntryTemplate(
        code="LOAN_PAYMENT",
        name="Bank loan installment",
        trigger_type=TriggerType.LOAN_PAYMENT,
        is_active=True,
        lines=_lines(
            (FixedAccount(chart.BANK_LOANS), DR, AmountType.PRINCIPAL, "Principal"),
            (FixedAccount(chart.INTEREST_EXPENSE), DR, AmountType.INTEREST, "Interest"),
            (TREASURY, CR, AmountType.TOTAL, "Installment paid"),
        ),
    ),
    JournalEntryTemplate(
        code="EXPENSE",
        name="Direct expense",
        trigger_type=TriggerType.EXPENSE,
        is_active=True,
        lines=_lines(
            (EXPENSE_ACCOUNT, DR, AmountType.TOTAL, "Expense"),
            (TREASURY, CR, AmountType.TOTAL, "Funds paid"),
        ),
    ),
]

# Template used when a business event names no template explicitly
TRIGGER_DEFAULTS: dict[TriggerType, str] = {
    TriggerType.SALE_INVOICE: "SALE_INVOICE_A",
    TriggerType.PURCHASE_INVOICE: "PURCHASE_INVOICE",
    TriggerType.CUSTOMER_RECEIPT: "CUSTOMER_RECEIPT",
    TriggerType.SUPPLIER_PAYMENT: "SUPPLIER_PAYMENT",
    TriggerType.CREDIT_NOTE: "PURCHASE_CREDIT_NOTE",
    TriggerType.SALARY_PAYMENT: "SALARY_PAYMENT",
    TriggerType.LOAN_DISBURSEMENT: "LOAN_DISBURSEMENT",
    TriggerType.LOAN_PAYMENT: "LOAN_PAYMENT",
    TriggerType.EXPENSE: "EXPENSE",
}
