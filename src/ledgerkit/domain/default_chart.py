"""Standard chart of accounts for a trading/services company.

Headers (levels 1-3 under assets and liabilities) are summary accounts and do
not accept entries.
"""

from ledgerkit.domain.entities import AccountDefinition, AccountType

A = AccountType.ASSET
L = AccountType.LIABILITY
E = AccountType.EQUITY
I = AccountType.INCOME
X = AccountType.EXPENSE

# (code, name, type, accepts_entries)
_ROWS = [
    ("1", "ASSETS", A, False),
    ("1.1", "CURRENT ASSETS", A, False),
    ("1.1.01", "Cash and Banks", A, False),
    ("1.1.01.001", "Cash on Hand", A, True),
    ("1.1.01.002", "Petty Cash", A, True),
    ("1.1.01.003", "Bank Current Account", A, True),
    ("1.1.01.004", "Bank Savings Account", A, True),
    ("1.1.01.005", "Checks to Deposit", A, True),
    ("1.1.02", "Investments", A, False),
    ("1.1.02.001", "Term Deposits", A, True),
    ("1.1.03", "Trade Receivables", A, False),
    ("1.1.03.001", "Accounts Receivable", A, True),
    ("1.1.03.002", "Notes Receivable", A, True),
    ("1.1.03.003", "Credit Card Receivables", A, True),
    ("1.1.03.004", "Third-Party Checks", A, True),
    ("1.1.04", "Other Receivables", A, False),
    ("1.1.04.001", "VAT Input Credit", A, True),
    ("1.1.04.002", "Withholdings and Perceptions Receivable", A, True),
    ("1.1.04.003", "Supplier Advances", A, True),
    ("1.1.05", "Inventory", A, False),
    ("1.1.05.001", "Merchandise", A, True),
    ("1.1.05.002", "Raw Materials", A, True),
    ("1.1.05.003", "Work in Progress", A, True),
    ("1.1.05.004", "Finished Goods", A, True),
    ("1.2", "NON-CURRENT ASSETS", A, False),
    ("1.2.01", "Property and Equipment", A, False),
    ("1.2.01.001", "Buildings", A, True),
    ("1.2.01.002", "Vehicles", A, True),
    ("1.2.01.003", "Furniture and Fixtures", A, True),
    ("1.2.01.004", "Machinery and Equipment", A, True),
    ("1.2.01.005", "Computer Equipment", A, True),
    ("1.2.01.006", "Installations", A, True),
    ("1.2.02", "Accumulated Depreciation", A, False),
    ("1.2.02.001", "Accumulated Depreciation - Vehicles", A, True),
    ("1.2.02.002", "Accumulated Depreciation - Furniture", A, True),
    ("1.2.02.003", "Accumulated Depreciation - Machinery", A, True),
    ("1.2.02.004", "Accumulated Depreciation - Computers", A, True),
    ("2", "LIABILITIES", L, False),
    ("2.1", "CURRENT LIABILITIES", L, False),
    ("2.1.01", "Trade Payables", L, False),
    ("2.1.01.001", "Suppliers", L, True),
    ("2.1.01.002", "Notes Payable", L, True),
    ("2.1.01.003", "Customer Advances", L, True),
    ("2.1.02", "Tax Liabilities", L, False),
    ("2.1.02.001", "VAT Output Debit", L, True),
    ("2.1.02.002", "VAT Payable", L, True),
    ("2.1.02.003", "Withholdings Payable", L, True),
    ("2.1.02.004", "Perceptions Payable", L, True),
    ("2.1.02.005", "Income Tax Payable", L, True),
    ("2.1.02.006", "Gross Receipts Tax Payable", L, True),
    ("2.1.03", "Payroll Liabilities", L, False),
    ("2.1.03.001", "Salaries Payable", L, True),
    ("2.1.03.002", "Social Security Payable", L, True),
    ("2.1.03.003", "Contributions Payable", L, True),
    ("2.1.04", "Bank and Financial Debt", L, False),
    ("2.1.04.001", "Bank Loans", L, True),
    ("2.1.04.002", "Bank Overdraft", L, True),
    ("2.1.04.003", "Credit Cards Payable", L, True),
    ("2.2", "NON-CURRENT LIABILITIES", L, False),
    ("2.2.01", "Long-Term Debt", L, False),
    ("2.2.01.001", "Long-Term Loans", L, True),
    ("2.2.01.002", "Mortgages Payable", L, True),
    ("3", "EQUITY", E, False),
    ("3.1", "Capital", E, False),
    ("3.1.01", "Share Capital", E, True),
    ("3.1.02", "Owner Contributions", E, True),
    ("3.2", "Results", E, False),
    ("3.2.01", "Retained Earnings", E, True),
    ("3.2.02", "Current Year Result", E, True),
    ("4", "INCOME", I, False),
    ("4.1", "Operating Income", I, False),
    ("4.1.01", "Sales", I, True),
    ("4.1.02", "Export Sales", I, True),
    ("4.1.03", "Services Rendered", I, True),
    ("4.2", "Other Income", I, False),
    ("4.2.01", "Interest Earned", I, True),
    ("4.2.02", "Discounts Received", I, True),
    ("4.2.03", "Foreign Exchange Gains", I, True),
    ("5", "EXPENSES", X, False),
    ("5.1", "Cost of Sales", X, False),
    ("5.1.01", "Cost of Goods Sold", X, True),
    ("5.1.02", "Purchases", X, True),
    ("5.2", "Administrative Expenses", X, False),
    ("5.2.01", "Salaries and Wages", X, True),
    ("5.2.02", "Social Charges", X, True),
    ("5.2.03", "Professional Fees", X, True),
    ("5.2.04", "Utilities", X, True),
    ("5.2.05", "Rent", X, True),
    ("5.2.06", "Insurance", X, True),
    ("5.2.07", "Taxes and Fees", X, True),
    ("5.2.08", "Office Expenses", X, True),
    ("5.2.09", "Maintenance and Repairs", X, True),
    ("5.2.10", "Depreciation", X, True),
    ("5.3", "Selling Expenses", X, False),
    ("5.3.01", "Sales Commissions", X, True),
    ("5.3.02", "Advertising", X, True),
    ("5.3.03", "Distribution Expenses", X, True),
    ("5.3.04", "Freight", X, True),
    ("5.4", "Financial Expenses", X, False),
    ("5.4.01", "Interest Expense", X, True),
    ("5.4.02", "Bank Charges", X, True),
    ("5.4.03", "Foreign Exchange Losses", X, True),
    ("5.4.04", "Discounts Granted", X, True),
]

DEFAULT_CHART: list[AccountDefinition] = [
    AccountDefinition(code=code, name=name, account_type=account_type, accepts_entries=accepts)
    for code, name, account_type, accepts in _ROWS
]

# Codes the default templates post to
CASH = "1.1.01.001"
BANK = "1.1.01.003"
RECEIVABLES = "1.1.03.001"
VAT_CREDIT = "1.1.04.001"
TAX_CREDITS = "1.1.04.002"
MERCHANDISE = "1.1.05.001"
SUPPLIERS = "2.1.01.001"
VAT_DEBIT = "2.1.02.001"
WITHHOLDINGS_PAYABLE = "2.1.02.003"
SOCIAL_SECURITY_PAYABLE = "2.1.03.002"
BANK_LOANS = "2.1.04.001"
SALES = "4.1.01"
SALARIES = "5.2.01"
INTEREST_EXPENSE = "5.4.01"
