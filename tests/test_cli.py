"""End-to-end tests for the command line."""

import json

from khata.cli.main import cli


def invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--owner", "acme", *args], **kwargs
    )


def test_full_workflow(cli_runner, temp_db, fixtures_dir):
    """Import a bank export, then look at transactions, dashboard, GST and chat."""
    result = invoke(cli_runner, temp_db, "import", str(fixtures_dir / "bank_export.csv"))
    assert result.exit_code == 0, result.output
    assert "Imported: 3 transactions" in result.output
    assert "Dropped: 1 rows" in result.output
    assert "Txn Date" in result.output

    result = invoke(cli_runner, temp_db, "transactions", "list")
    assert result.exit_code == 0, result.output
    assert "Found 3 transaction(s)" in result.output
    assert "Client payment Infosys" in result.output

    result = invoke(cli_runner, temp_db, "dashboard")
    assert result.exit_code == 0, result.output
    assert "Key figures" in result.output
    assert "Top expense categories" in result.output

    result = invoke(cli_runner, temp_db, "gst")
    assert result.exit_code == 0, result.output
    assert "GST by rate" in result.output
    assert "GSTR-3B" in result.output

    result = invoke(cli_runner, temp_db, "chat", "What", "are", "my", "biggest", "expenses?")
    assert result.exit_code == 0, result.output
    assert "Rent" in result.output


def test_import_json_output(cli_runner, temp_db, fixtures_dir):
    result = invoke(
        cli_runner, temp_db, "import", str(fixtures_dir / "bank_export.csv"), "--json"
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["imported"] == 3
    assert data["mapping"]["amount"] == "Amount"


def test_import_with_explicit_mapping(cli_runner, temp_db, tmp_path):
    csv_path = tmp_path / "erp.csv"
    csv_path.write_text("Posted,Memo,Withdrawal\n2024-02-01,Team lunch,1200\n", encoding="utf-8")

    result = invoke(
        cli_runner, temp_db, "import", str(csv_path),
        "--map", "date=Posted", "--map", "amount=Withdrawal", "--map", "description=Memo",
    )

    assert result.exit_code == 0, result.output
    assert "Imported: 1 transactions" in result.output


def test_import_rejects_unknown_map_field(cli_runner, temp_db, fixtures_dir):
    result = invoke(
        cli_runner, temp_db, "import", str(fixtures_dir / "bank_export.csv"), "--map", "colour=x"
    )

    assert result.exit_code == 1
    assert "Unknown field 'colour'" in result.output


def test_import_without_amount_column_fails(cli_runner, temp_db, tmp_path):
    csv_path = tmp_path / "bad.csv"
    csv_path.write_text("Date,Description\n2024-01-01,Test\n", encoding="utf-8")

    result = invoke(cli_runner, temp_db, "import", str(csv_path))

    assert result.exit_code == 1
    assert "Error: Could not find an amount column" in result.output


def test_transactions_list_empty(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "transactions", "list")

    assert result.exit_code == 0
    assert "No transactions found." in result.output


def test_transactions_delete(cli_runner, temp_db, transaction_service, new_transaction):
    transaction_service.create_transactions("acme", [new_transaction("100")])
    [txn] = transaction_service.list_transactions("acme")

    result = invoke(cli_runner, temp_db, "transactions", "delete", str(txn.id), input="y\n")

    assert result.exit_code == 0, result.output
    assert f"Deleted transaction {txn.id}" in result.output
    assert transaction_service.list_transactions("acme") == []


def test_transactions_delete_cancelled(cli_runner, temp_db, transaction_service, new_transaction):
    transaction_service.create_transactions("acme", [new_transaction("100")])
    [txn] = transaction_service.list_transactions("acme")

    result = invoke(cli_runner, temp_db, "transactions", "delete", str(txn.id), input="n\n")

    assert "Deletion cancelled." in result.output
    assert len(transaction_service.list_transactions("acme")) == 1


def test_transactions_delete_missing(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "transactions", "delete", "99", "--yes")

    assert result.exit_code == 1
    assert "Transaction 99 not found" in result.output


def test_seed_then_report(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "seed", "--months", "2", "--seed", "1")
    assert result.exit_code == 0, result.output
    assert "sample transactions over 2 month(s)" in result.output

    result = invoke(cli_runner, temp_db, "transactions", "list", "--json")
    assert result.exit_code == 0, result.output
    transactions = json.loads(result.output)
    assert 30 <= len(transactions) <= 50

    result = invoke(cli_runner, temp_db, "dashboard", "--json")
    assert result.exit_code == 0, result.output
    assert len(json.loads(result.output)["monthly_data"]) == 12


def test_seed_reset_replaces_data(cli_runner, temp_db, transaction_service):
    invoke(cli_runner, temp_db, "seed", "--months", "1", "--seed", "3")
    first = len(transaction_service.list_transactions("acme"))

    result = invoke(cli_runner, temp_db, "seed", "--months", "1", "--seed", "3", "--reset")

    assert result.exit_code == 0, result.output
    assert len(transaction_service.list_transactions("acme")) == first


def test_owner_option_scopes_data(cli_runner, temp_db):
    invoke(cli_runner, temp_db, "seed", "--months", "1")

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--owner", "someone-else", "transactions", "list"]
    )

    assert "No transactions found." in result.output


def test_owner_from_environment(cli_runner, temp_db):
    cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "seed", "--months", "1"],
        env={"KHATA_OWNER": "env-owner"},
    )

    result = invoke(cli_runner, temp_db, "transactions", "list")
    assert "No transactions found." in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transactions", "list"],
        env={"KHATA_OWNER": "env-owner"},
    )
    assert "Found" in result.output


def test_chat_json(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "chat", "--json", "tds")

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "message": "Your TDS deductions breakdown:\n\nNo TDS deductions recorded.",
        "data": None,
    }


def test_chat_requires_message(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "chat")

    assert result.exit_code != 0


def test_gst_json_empty(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "gst", "--json")

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["summary"]["total_net_liability"] == 0
    assert data["gst_by_rate"] == []


def test_categories(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "categories")

    assert result.exit_code == 0
    assert "Income:" in result.output
    assert "Professional Fees" in result.output

    result = invoke(cli_runner, temp_db, "categories", "--tds")
    assert "194J" in result.output


def test_help_does_not_need_database(cli_runner, tmp_path):
    result = cli_runner.invoke(cli, ["--db-path", str(tmp_path / "x.db"), "--help"])

    assert result.exit_code == 0
    assert "GST and TDS bookkeeping" in result.output
    assert not (tmp_path / "x.db").exists()
