"""Financial reports over POSTED journal lines.

Every report is the same pipeline: read posted lines for a date window,
group them by account, apply the account type's sign convention and total.
Nothing here writes to the database or caches balances.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.balance import BALANCE_TOLERANCE, ZERO, is_material, signed_balance, split_balance
from ledgerkit.domain.entities import (
    Account,
    PostedLine,
    AccountType,
    BalanceSheet,
    BalanceSheetTotals,
    GeneralLedger,
    GeneralLedgerTotals,
    IncomeStatement,
    IncomeStatementTotals,
    LedgerMovement,
    ReportAccount,
    StatementLine,
    TrialBalance,
    TrialBalanceRow,
    TrialBalanceTotals,
)
from ledgerkit.domain.errors import AccountNotFoundError, ValidationError, account_not_found
from ledgerkit.logging_config import get_logger
from ledgerkit.utils.account_code import code_sort_key

logger = get_logger("reports")

Sums = dict[int, tuple[Decimal, Decimal]]


def _accumulate(lines: Iterable[PostedLine]) -> Sums:
    sums: Sums = {}
    for line in lines:
        debit, credit = sums.get(line.account_id, (ZERO, ZERO))
        sums[line.account_id] = (debit + line.debit, credit + line.credit)
    return sums


def _report_account(account: Account) -> ReportAccount:
    return ReportAccount(
        id=account.id,
        code=account.code,
        name=account.name,
        account_type=account.account_type,
    )


class ReportService:
    """Read-only financial statements."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def _sums(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> Sums:
        """Sum debit and credit of POSTED lines per account within a window."""
        return _accumulate(self.db.list_posted_lines(start_date=start_date, end_date=end_date, account_id=account_id))

    def _window(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> tuple[Sums, Decimal]:
        """Per-account sums plus the tolerance within which their columns tie.

        Entries post when off by up to a cent, so columns built from n
        entries may differ by up to n cents.
        """
        lines = self.db.list_posted_lines(start_date=start_date, end_date=end_date)
        entry_count = len({line.entry_id for line in lines})
        return _accumulate(lines), BALANCE_TOLERANCE * max(entry_count, 1)

    def _accounts(self) -> list[Account]:
        return sorted(self.db.list_accounts(), key=lambda acc: code_sort_key(acc.code))

    def _balances(self, sums: Sums, account_types: set[AccountType]) -> list[tuple[Account, Decimal]]:
        """Signed balance per account of the given types that has movements."""
        result = []
        for account in self._accounts():
            if account.account_type not in account_types or account.id not in sums:
                continue
            debit, credit = sums[account.id]
            result.append((account, signed_balance(account.account_type, debit, credit)))
        return result

    @staticmethod
    def _statement_lines(balances: list[tuple[Account, Decimal]], account_type: AccountType) -> list[StatementLine]:
        return [
            StatementLine(account=_report_account(account), balance=balance)
            for account, balance in balances
            if account.account_type == account_type and is_material(balance)
        ]

    @staticmethod
    def _total(balances: list[tuple[Account, Decimal]], account_type: AccountType) -> Decimal:
        return sum(
            (balance for account, balance in balances if account.account_type == account_type),
            ZERO,
        )

    def trial_balance(
        self,
        as_of: date,
        start_date: Optional[date] = None,
        include_zero: bool = False,
    ) -> TrialBalance:
        """Trial balance (sums and balances) as of a date.

        Every account with POSTED movements in the window is listed, so the
        columns always tie; ``include_zero`` also lists active postable
        accounts without movements.

        Args:
            as_of: Last date included
            start_date: First date included (default: since inception)
            include_zero: List postable accounts with no movements

        Returns:
            Trial balance rows and column totals
        """
        sums, tolerance = self._window(start_date=start_date, end_date=as_of)
        rows = []
        for account in self._accounts():
            if account.id not in sums:
                if not (include_zero and account.is_postable):
                    continue
            sum_debit, sum_credit = sums.get(account.id, (ZERO, ZERO))
            balance = signed_balance(account.account_type, sum_debit, sum_credit)
            debit_balance, credit_balance = split_balance(account.account_type, balance)
            rows.append(
                TrialBalanceRow(
                    account=_report_account(account),
                    sum_debit=sum_debit,
                    sum_credit=sum_credit,
                    balance=balance,
                    debit_balance=debit_balance,
                    credit_balance=credit_balance,
                )
            )

        report = TrialBalance(
            as_of=as_of,
            start_date=start_date,
            rows=rows,
            totals=TrialBalanceTotals(
                sum_debit=sum((row.sum_debit for row in rows), ZERO),
                sum_credit=sum((row.sum_credit for row in rows), ZERO),
                debit=sum((row.debit_balance for row in rows), ZERO),
                credit=sum((row.credit_balance for row in rows), ZERO),
            ),
            tolerance=tolerance,
        )
        if not report.is_balanced:
            logger.warning(
                "trial_balance_not_tied",
                extra={"as_of": as_of.isoformat(), "debit": report.totals.debit, "credit": report.totals.credit},
            )
        logger.debug("report_computed", extra={"report": "trial_balance", "rows": len(rows)})
        return report

    def balance_sheet(self, as_of: date, result_from: Optional[date] = None) -> BalanceSheet:
        """Balance sheet as of a date.

        Income and expense are not closed into equity, so their net is shown
        as a separate result line accumulated over ``[result_from, as_of]``
        (since inception when ``result_from`` is None). With the default
        window assets equal liabilities + equity + result.

        Args:
            as_of: Balance date
            result_from: Start of the result accumulation window

        Returns:
            Asset, liability and equity lines (balances above 0.01) and totals
        """
        position_sums, tolerance = self._window(end_date=as_of)
        position = self._balances(
            position_sums,
            {AccountType.ASSET, AccountType.LIABILITY, AccountType.EQUITY},
        )
        flows = self._balances(
            self._sums(start_date=result_from, end_date=as_of),
            {AccountType.INCOME, AccountType.EXPENSE},
        )

        assets = self._total(position, AccountType.ASSET)
        liabilities = self._total(position, AccountType.LIABILITY)
        equity = self._total(position, AccountType.EQUITY)
        result = self._total(flows, AccountType.INCOME) - self._total(flows, AccountType.EXPENSE)

        logger.debug("report_computed", extra={"report": "balance_sheet", "as_of": as_of.isoformat()})
        return BalanceSheet(
            as_of=as_of,
            result_from=result_from,
            assets=self._statement_lines(position, AccountType.ASSET),
            liabilities=self._statement_lines(position, AccountType.LIABILITY),
            equity=self._statement_lines(position, AccountType.EQUITY),
            totals=BalanceSheetTotals(
                assets=assets,
                liabilities=liabilities,
                equity=equity,
                result=result,
                liabilities_and_equity=liabilities + equity + result,
            ),
            tolerance=tolerance,
        )

    def income_statement(self, start_date: date, end_date: date) -> IncomeStatement:
        """Income statement for the period ``[start_date, end_date]``.

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date > end_date:
            raise ValidationError("Start date must not be after end date")

        flows = self._balances(
            self._sums(start_date=start_date, end_date=end_date),
            {AccountType.INCOME, AccountType.EXPENSE},
        )
        income = self._total(flows, AccountType.INCOME)
        expense = self._total(flows, AccountType.EXPENSE)

        logger.debug("report_computed", extra={"report": "income_statement"})
        return IncomeStatement(
            start_date=start_date,
            end_date=end_date,
            income=self._statement_lines(flows, AccountType.INCOME),
            expenses=self._statement_lines(flows, AccountType.EXPENSE),
            totals=IncomeStatementTotals(income=income, expense=expense, result=income - expense),
        )

    def general_ledger(
        self,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> GeneralLedger:
        """Chronological POSTED movements of one account with a running balance.

        The running balance starts at zero at ``start_date``; earlier
        movements are not carried in as an opening balance.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_not_found(account_id))

        movements = []
        running = ZERO
        total_debit = ZERO
        total_credit = ZERO
        for line in self.db.list_posted_lines(start_date=start_date, end_date=end_date, account_id=account_id):
            running += signed_balance(account.account_type, line.debit, line.credit)
            total_debit += line.debit
            total_credit += line.credit
            movements.append(
                LedgerMovement(
                    entry_id=line.entry_id,
                    entry_number=line.entry_number,
                    date=line.date,
                    entry_description=line.entry_description,
                    line_description=line.line_description,
                    debit=line.debit,
                    credit=line.credit,
                    balance=running,
                )
            )

        logger.debug("report_computed", extra={"report": "general_ledger", "account": account.code})
        return GeneralLedger(
            account=_report_account(account),
            start_date=start_date,
            end_date=end_date,
            movements=movements,
            totals=GeneralLedgerTotals(debit=total_debit, credit=total_credit, balance=running),
        )

    def account_balance(self, account_id: int, as_of: Optional[date] = None) -> Decimal:
        """Signed balance of one account from its POSTED lines."""
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_not_found(account_id))
        debit, credit = self._sums(end_date=as_of, account_id=account_id).get(account_id, (ZERO, ZERO))
        return signed_balance(account.account_type, debit, credit)
