"""CLI tests for end-to-end workflows."""

import csv
from datetime import date
from decimal import Decimal

import pytest

from finnexus.cli.main import cli
from finnexus.domain.entities import TransactionStatus


@pytest.fixture
def invoke(cli_runner, temp_db):
    """Invoke the CLI against the temporary database."""

    def _invoke(*args, **kwargs):
        # Drop the fixture's session so later reads see the CLI's writes
        temp_db.disconnect()
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)

    return _invoke


def _created_id(output):
    for line in output.splitlines():
        if line.startswith("Created transaction "):
            return line.split()[-1]
    raise AssertionError(f"No transaction ID in output: {output}")


def _add(invoke, *args):
    result = invoke("add", *args)
    assert result.exit_code == 0, result.output
    return _created_id(result.output)


class TestAddCommand:
    """Tests for the add command."""

    def test_add_with_commission(self, invoke, temp_db):
        """Test adding a sale with a derived commission."""
        result = invoke(
            "add",
            "--date", "2024-03-15",
            "--type", "income",
            "--amount", "1.000,00",
            "--description", "Consulting",
            "--category", "services",
            "--employee", "Ana",
            "--commission-rate", "10",
        )

        assert result.exit_code == 0, result.output
        assert "R$ 1.000,00" in result.output
        assert "Commission: R$ 100,00 (Ana)" in result.output
        txn = temp_db.get_transaction(_created_id(result.output))
        assert txn.commission_amount == Decimal("100")
        assert txn.date == date(2024, 3, 15)

    def test_add_partial_requires_pending(self, invoke, temp_db):
        """Test that a partial transaction without pending amount is rejected."""
        result = invoke(
            "add", "--type", "income", "--amount", "100", "--description", "Invoice",
            "--status", "partial",
        )

        assert result.exit_code == 1
        assert "cannot be partial" in result.output
        assert temp_db.list_transactions() == []

    def test_add_invalid_amount(self, invoke):
        """Test that unparseable amounts exit with an error."""
        result = invoke("add", "--type", "expense", "--amount", "abc", "--description", "Rent")

        assert result.exit_code == 1
        assert "Error: Invalid amount" in result.output


class TestTransactionCommands:
    """Tests for the transaction command group."""

    def test_list_filters(self, invoke):
        """Test listing with a type filter and totals."""
        _add(invoke, "--date", "2024-03-01", "--type", "income", "--amount", "500", "--description", "Sale")
        _add(invoke, "--date", "2024-03-02", "--type", "expense", "--amount", "200", "--description", "Rent",
             "--category", "Office")

        result = invoke("transaction", "list", "--type", "expense")

        assert result.exit_code == 0
        assert "Found 1 transaction(s)" in result.output
        assert "Rent" in result.output
        assert "Sale" not in result.output
        assert "Expenses: R$ 200,00" in result.output

    def test_list_empty(self, invoke):
        """Test the empty message."""
        result = invoke("transaction", "list")

        assert result.exit_code == 0
        assert "No transactions found." in result.output

    def test_partial_workflow(self, invoke, temp_db):
        """Test entering and leaving PARTIAL through update and status."""
        txn_id = _add(invoke, "--type", "income", "--amount", "1000", "--description", "Invoice 7")

        result = invoke("transaction", "status", txn_id, "partial")
        assert result.exit_code == 1
        assert "cannot be partial" in result.output

        result = invoke("transaction", "update", txn_id, "--status", "partial", "--pending", "400")
        assert result.exit_code == 0, result.output
        assert temp_db.get_transaction(txn_id).pending_amount == Decimal("400")

        result = invoke("transaction", "status", txn_id, "completed")
        assert result.exit_code == 0, result.output
        txn = temp_db.get_transaction(txn_id)
        assert txn.status == TransactionStatus.COMPLETED
        assert txn.pending_amount is None

    def test_update_clear_commission(self, invoke, temp_db):
        """Test --clear-commission removes all commission fields."""
        txn_id = _add(
            invoke, "--type", "income", "--amount", "1000", "--description", "Deal",
            "--employee", "Ana", "--commission", "50", "--commission-date", "2024-04-10",
        )

        result = invoke("transaction", "update", txn_id, "--clear-commission")

        assert result.exit_code == 0, result.output
        txn = temp_db.get_transaction(txn_id)
        assert txn.employee_name is None
        assert txn.commission_amount is None
        assert txn.commission_payment_date is None

    def test_update_conflicting_options(self, invoke):
        """Test that --clear-pending and --pending cannot be combined."""
        txn_id = _add(invoke, "--type", "income", "--amount", "10", "--description", "X")

        result = invoke("transaction", "update", txn_id, "--pending", "5", "--clear-pending")

        assert result.exit_code == 1
        assert "cannot be combined" in result.output

    def test_update_missing(self, invoke):
        """Test updating an unknown transaction."""
        result = invoke("transaction", "update", "missing", "--notes", "x")

        assert result.exit_code == 1
        assert "Transaction missing not found" in result.output

    def test_delete_with_confirmation(self, invoke, temp_db):
        """Test delete prompts and honours the answer."""
        txn_id = _add(invoke, "--type", "income", "--amount", "10", "--description", "X")

        result = invoke("transaction", "delete", txn_id, input="n\n")
        assert "Deletion cancelled." in result.output
        assert temp_db.get_transaction(txn_id) is not None

        result = invoke("transaction", "delete", txn_id, input="y\n")
        assert result.exit_code == 0
        assert f"Deleted transaction {txn_id}" in result.output

    def test_clear(self, invoke, temp_db):
        """Test clearing all transactions with --yes."""
        _add(invoke, "--type", "income", "--amount", "10", "--description", "X")
        _add(invoke, "--type", "income", "--amount", "20", "--description", "Y")

        result = invoke("transaction", "clear", "--yes")

        assert result.exit_code == 0
        assert temp_db.list_transactions() == []


class TestTaxCommands:
    """Tests for the tax command group."""

    def test_add_list_delete(self, invoke):
        """Test the tax workflow and effective rate."""
        result = invoke("tax", "list")
        assert "Effective rate: 15,0% (default)" in result.output

        assert invoke("tax", "add", "ISS", "10").exit_code == 0
        result = invoke("tax", "add", "PIS", "2,5")
        assert result.exit_code == 0
        tax_id = result.output.split("ID:")[1].strip()

        result = invoke("tax", "list")
        assert "ISS" in result.output
        assert "Effective rate: 12,5%" in result.output

        assert invoke("tax", "delete", tax_id).exit_code == 0
        assert "Effective rate: 10,0%" in invoke("tax", "list").output

    def test_invalid_percentage(self, invoke):
        """Test out-of-range percentages."""
        result = invoke("tax", "add", "ISS", "150")

        assert result.exit_code == 1
        assert "between 0 and 100" in result.output


class TestDashboardCommand:
    """Tests for the dashboard command."""

    def test_month_dashboard(self, invoke):
        """Test KPI cards, trend and chart output."""
        _add(invoke, "--date", "2024-03-10", "--type", "income", "--amount", "1000", "--description", "Sale")
        _add(invoke, "--date", "2024-03-11", "--type", "expense", "--amount", "300", "--description", "Rent")
        _add(invoke, "--date", "2024-03-12", "--type", "income", "--amount", "500", "--description", "Due",
             "--status", "pending")

        result = invoke("dashboard", "--month", "2024-03", "--chart", "--today", "2024-03-31")

        assert result.exit_code == 0, result.output
        assert "Dashboard - March 2024" in result.output
        assert "R$ 1.000,00" in result.output
        assert "R$ 105,00" in result.output
        assert "R$ 595,00" in result.output
        assert "+100%" in result.output
        assert "Transactions in period: 3" in result.output
        assert "Chart counts completed transactions only." in result.output

    def test_day_dashboard(self, invoke):
        """Test DAY scope marks the selected day."""
        _add(invoke, "--date", "2024-03-10", "--type", "income", "--amount", "100", "--description", "Sale")

        result = invoke("dashboard", "--day", "2024-03-10", "--chart")

        assert result.exit_code == 0, result.output
        assert "Dashboard - Day 10/03/2024" in result.output
        assert "10 *" in result.output

    def test_month_and_day_conflict(self, invoke):
        """Test that --month and --day are exclusive."""
        result = invoke("dashboard", "--month", "2024-03", "--day", "2024-03-10")

        assert result.exit_code == 1
        assert "cannot be combined" in result.output


class TestReportCommands:
    """Tests for the report command group."""

    def test_summary(self, invoke):
        """Test the all-time summary and category breakdown."""
        _add(invoke, "--date", "2024-01-10", "--type", "income", "--amount", "1000", "--description", "Sale")
        _add(invoke, "--date", "2024-02-11", "--type", "expense", "--amount", "300", "--description", "Staff",
             "--category", "Payroll")

        result = invoke("report", "summary")

        assert result.exit_code == 0, result.output
        assert "Payroll" in result.output
        assert "R$ 595,00" in result.output
        assert "Transactions: 2" in result.output

    def test_csv_export(self, invoke, tmp_path):
        """Test the CSV export file."""
        _add(invoke, "--date", "2024-03-05", "--type", "income", "--amount", "1234,5", "--description", "Sale")
        output = tmp_path / "transactions.csv"

        result = invoke("report", "csv", str(output))

        assert result.exit_code == 0, result.output
        assert "Exported 1 transaction(s)" in result.output
        with open(output, newline="", encoding="utf-8-sig") as f:
            rows = list(csv.reader(f, delimiter=";"))
        assert rows[1][1:6] == ["05/03/2024", "Sale", "Other", "income", "1234,50"]

    def test_pdf_export(self, invoke, tmp_path):
        """Test the PDF export file."""
        _add(invoke, "--type", "income", "--amount", "100", "--description", "Sale")
        output = tmp_path / "report.pdf"

        result = invoke("report", "pdf", str(output))

        assert result.exit_code == 0, result.output
        assert output.read_bytes().startswith(b"%PDF")


class TestAdvisorCommands:
    """Tests for the advisor command group without an API key."""

    def test_insights_without_key(self, invoke):
        """Test the missing-key fallback."""
        result = invoke("advisor", "insights")

        assert result.exit_code == 0
        assert "OPENAI_API_KEY" in result.output

    def test_chat_without_key(self, invoke):
        """Test the chat fallback."""
        result = invoke("advisor", "chat", "What is my profit?")

        assert result.exit_code == 0
        assert "API key missing." in result.output


class TestRemoteBackendFromCli:
    """Tests for the CLI against an unconfigured remote store."""

    def test_reads_degrade_and_writes_fail(self, cli_runner, monkeypatch):
        """Test that reads show a warning and writes exit with an error."""
        monkeypatch.setenv("FINNEXUS_STORAGE_BACKEND", "remote")

        result = cli_runner.invoke(cli, ["dashboard"])
        assert result.exit_code == 0, result.output
        assert "Warning: Remote store is not configured" in result.output

        result = cli_runner.invoke(
            cli, ["add", "--type", "income", "--amount", "10", "--description", "X"]
        )
        assert result.exit_code == 1
        assert "Error: Remote store is not configured" in result.output
