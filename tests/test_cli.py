"""End-to-end tests for the command line interface."""

import json

import pytest

from burnrate.cli.main import cli


def _invoke(cli_runner, db_path, *args, input=None):
    return cli_runner.invoke(cli, ["--db-path", db_path, *args], input=input)


def _add_signal(cli_runner, db_path, *args):
    result = _invoke(cli_runner, db_path, "signal", "add", *args)
    assert result.exit_code == 0, result.output
    created = next(line for line in result.output.splitlines() if line.startswith("Created signal"))
    return created.split()[-1]


NETFLIX = (
    "--date", "2024-02-08", "--amount", "22.99", "--flow", "outflow",
    "--nature", "fixed_recurring", "--merchant", "Netflix", "--category", "Streaming",
)
PAYCHECK = (
    "--amount", "3250", "--flow", "inflow", "--nature", "income_source",
    "--merchant", "Acme Corp", "--category", "Salary", "--frequency", "bi-weekly",
)


def test_help_does_not_need_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "signal" in result.output
    assert "invest" in result.output


def test_signal_add_and_list(cli_runner, cli_db_path):
    signal_id = _add_signal(cli_runner, cli_db_path, *NETFLIX)

    result = _invoke(cli_runner, cli_db_path, "signal", "list")

    assert result.exit_code == 0
    assert signal_id[:8] in result.output
    assert "Netflix" in result.output
    assert "-$22.99" in result.output
    assert "1 signal" in result.output


def test_signal_list_empty(cli_runner, cli_db_path):
    result = _invoke(cli_runner, cli_db_path, "signal", "list")

    assert result.exit_code == 0
    assert "No signals found." in result.output


def test_signal_add_rejects_bad_amount(cli_runner, cli_db_path):
    result = _invoke(
        cli_runner, cli_db_path, "signal", "add", "--date", "today", "--amount", "lots",
        "--flow", "outflow", "--nature", "fixed_recurring", "--merchant", "X",
    )

    assert result.exit_code == 1
    assert "Invalid amount format" in result.output


def test_signal_add_rejects_bad_flow(cli_runner, cli_db_path):
    result = _invoke(
        cli_runner, cli_db_path, "signal", "add", "--date", "today", "--amount", "5",
        "--flow", "sideways", "--nature", "fixed_recurring", "--merchant", "X",
    )

    assert result.exit_code == 2


def test_signal_show_edit_delete_by_prefix(cli_runner, cli_db_path):
    signal_id = _add_signal(cli_runner, cli_db_path, *NETFLIX, "--frequency", "monthly")
    prefix = signal_id[:8]

    shown = _invoke(cli_runner, cli_db_path, "signal", "show", prefix)
    assert shown.exit_code == 0
    assert f"ID: {signal_id}" in shown.output
    assert "Frequency: Monthly" in shown.output

    edited = _invoke(
        cli_runner, cli_db_path, "signal", "edit", prefix, "--amount", "24.99", "--frequency", ""
    )
    assert edited.exit_code == 0
    assert f"Updated signal {signal_id}" in edited.output

    shown = _invoke(cli_runner, cli_db_path, "signal", "show", signal_id)
    assert "Amount: $24.99 USD" in shown.output
    assert "Frequency: -" in shown.output

    deleted = _invoke(cli_runner, cli_db_path, "signal", "delete", prefix, "--yes")
    assert deleted.exit_code == 0
    assert f"Deleted signal {signal_id}" in deleted.output


def test_signal_edit_without_changes(cli_runner, cli_db_path):
    signal_id = _add_signal(cli_runner, cli_db_path, *NETFLIX)

    result = _invoke(cli_runner, cli_db_path, "signal", "edit", signal_id)

    assert result.exit_code == 0
    assert "Nothing to update." in result.output


def test_signal_delete_unknown(cli_runner, cli_db_path):
    result = _invoke(cli_runner, cli_db_path, "signal", "delete", "nope", "--yes")

    assert result.exit_code == 1
    assert "Error: Signal nope not found" in result.output


def test_signal_delete_cancelled(cli_runner, cli_db_path):
    signal_id = _add_signal(cli_runner, cli_db_path, *NETFLIX)

    result = _invoke(cli_runner, cli_db_path, "signal", "delete", signal_id, input="n\n")

    assert "Deletion cancelled." in result.output
    assert "Netflix" in _invoke(cli_runner, cli_db_path, "signal", "list").output


def test_signal_clear(cli_runner, cli_db_path):
    _add_signal(cli_runner, cli_db_path, *NETFLIX)
    _add_signal(cli_runner, cli_db_path, "--date", "2024-02-02", *PAYCHECK)

    result = _invoke(cli_runner, cli_db_path, "signal", "clear", "--yes")

    assert "Deleted 2 signals" in result.output
    assert "No signals to delete." in _invoke(cli_runner, cli_db_path, "signal", "clear", "--yes").output


def test_insights(cli_runner, cli_db_path):
    _add_signal(cli_runner, cli_db_path, "--date", "2024-01-19", *PAYCHECK)
    _add_signal(cli_runner, cli_db_path, "--date", "2024-02-02", *PAYCHECK)
    _add_signal(cli_runner, cli_db_path, *NETFLIX)

    result = _invoke(cli_runner, cli_db_path, "insights")

    assert result.exit_code == 0
    assert "Bi-Weekly" in result.output
    assert "$6,500.00" in result.output
    assert "$22.99" in result.output
    assert "$6,477.01" in result.output


def test_insights_empty(cli_runner, cli_db_path):
    result = _invoke(cli_runner, cli_db_path, "insights")

    assert result.exit_code == 0
    assert "(none)" in result.output
    assert "$0.00" in result.output


def test_import_and_document_commands(cli_runner, cli_db_path, fixtures_dir):
    reply = str(fixtures_dir / "statement_reply.txt")

    result = _invoke(cli_runner, cli_db_path, "import", reply, "--name", "Chase February.pdf")

    assert result.exit_code == 0, result.output
    assert "Imported 3 signals from 'Chase February.pdf'" in result.output
    assert "Skipped row 3" in result.output
    document_id = result.output.split("(document ")[1].split(")")[0]

    listed = _invoke(cli_runner, cli_db_path, "document", "list")
    assert "Chase February.pdf" in listed.output
    assert "3 signals" in listed.output

    deleted = _invoke(cli_runner, cli_db_path, "document", "delete", document_id, "--yes")
    assert "Deleted document 'Chase February.pdf' and 3 signals" in deleted.output
    assert "No signals found." in _invoke(cli_runner, cli_db_path, "signal", "list").output


def test_import_rejects_non_json(cli_runner, cli_db_path, tmp_path):
    reply = tmp_path / "reply.txt"
    reply.write_text("Sorry, I could not read that statement.")

    result = _invoke(cli_runner, cli_db_path, "import", str(reply))

    assert result.exit_code == 1
    assert "No JSON object found" in result.output


def test_document_delete_unknown(cli_runner, cli_db_path):
    result = _invoke(cli_runner, cli_db_path, "document", "delete", "missing", "--yes")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_invest_save_list_project_delete(cli_runner, cli_db_path):
    saved = _invoke(
        cli_runner, cli_db_path, "invest", "save", "401k",
        "--balance", "10000", "--contribution", "100", "--rate", "0",
    )
    assert saved.exit_code == 0, saved.output
    assert "Created investment account '401k'" in saved.output
    assert "Tracking $100.00/mo as a fixed cost" in saved.output

    listed = _invoke(cli_runner, cli_db_path, "invest", "list")
    assert "401k" in listed.output
    assert "$10,000.00" in listed.output

    insights = _invoke(cli_runner, cli_db_path, "insights")
    assert "-$100.00" in insights.output

    projected = _invoke(cli_runner, cli_db_path, "invest", "project", "--years", "1", "--accounts")
    assert projected.exit_code == 0, projected.output
    assert "$11,200.00" in projected.output
    assert "Total invested: $11,200.00" in projected.output
    assert "Total growth: $0.00" in projected.output

    updated = _invoke(cli_runner, cli_db_path, "invest", "save", "401k", "--contribution", "0")
    assert "Updated investment account '401k'" in updated.output
    assert "No signals found." in _invoke(cli_runner, cli_db_path, "signal", "list").output

    deleted = _invoke(cli_runner, cli_db_path, "invest", "delete", "401k", "--yes")
    assert "Deleted investment account '401k'" in deleted.output
    assert "No investment accounts found." in _invoke(cli_runner, cli_db_path, "invest", "list").output


def test_invest_project_validates_years(cli_runner, cli_db_path):
    result = _invoke(cli_runner, cli_db_path, "invest", "project", "--years", "0")

    assert result.exit_code == 2


def test_invest_project_without_accounts(cli_runner, cli_db_path):
    result = _invoke(cli_runner, cli_db_path, "invest", "project")

    assert result.exit_code == 0
    assert "No investment accounts found." in result.output


def test_invest_delete_unknown(cli_runner, cli_db_path):
    result = _invoke(cli_runner, cli_db_path, "invest", "delete", "HSA", "--yes")

    assert result.exit_code == 1
    assert "Investment account 'HSA' not found" in result.output


def test_summary(cli_runner, cli_db_path):
    _add_signal(cli_runner, cli_db_path, *NETFLIX)
    _add_signal(cli_runner, cli_db_path, "--date", "2024-02-02", *PAYCHECK)

    result = _invoke(cli_runner, cli_db_path, "summary", "--flow", "outflow")

    assert result.exit_code == 0
    assert "Streaming" in result.output
    assert "Salary" not in result.output

    counted = _invoke(cli_runner, cli_db_path, "summary", "--group-by", "merchant", "--metric", "count")
    assert "Acme Corp" in counted.output

    dated = _invoke(
        cli_runner, cli_db_path, "summary", "--group-by", "date",
        "--start-date", "2024-02-05", "--end-date", "2024-02-28",
    )
    assert "2024-02-08" in dated.output
    assert "2024-02-02" not in dated.output


def test_summary_bad_date(cli_runner, cli_db_path):
    result = _invoke(cli_runner, cli_db_path, "summary", "--start-date", "someday")

    assert result.exit_code == 1
    assert "Invalid date format" in result.output


def test_summary_by_month(cli_runner, cli_db_path):
    _add_signal(cli_runner, cli_db_path, *NETFLIX)
    _add_signal(cli_runner, cli_db_path, "--date", "2024-02-02", *PAYCHECK)
    _add_signal(
        cli_runner, cli_db_path, "--date", "2024-03-08", "--amount", "22.99", "--flow", "outflow",
        "--nature", "fixed_recurring", "--merchant", "Netflix", "--category", "Streaming",
    )

    result = _invoke(cli_runner, cli_db_path, "summary", "--group-by", "month")

    assert result.exit_code == 0, result.output
    assert "Inflow" in result.output and "Outflow" in result.output
    lines = result.output.splitlines()
    february = next(line for line in lines if line.startswith("2024-02"))
    march = next(line for line in lines if line.startswith("2024-03"))
    assert lines.index(february) < lines.index(march)
    assert "$3,250.00" in february
    assert "$3,227.01" in february
    assert "-$22.99" in march


def test_summary_by_month_rejects_flow(cli_runner, cli_db_path):
    result = _invoke(cli_runner, cli_db_path, "summary", "--group-by", "month", "--flow", "inflow")

    assert result.exit_code == 1
    assert "--flow does not apply" in result.output


def test_summary_custom_groups(cli_runner, cli_db_path):
    _add_signal(cli_runner, cli_db_path, *NETFLIX)
    _add_signal(cli_runner, cli_db_path, "--date", "2024-02-02", *PAYCHECK)

    result = _invoke(
        cli_runner, cli_db_path, "summary", "--group-by", "custom_groups",
        "--group", "Fun=Streaming,Games", "--metric", "count",
    )

    assert result.exit_code == 0, result.output
    assert "Group" in result.output
    assert "Fun" in result.output
    assert "Other" in result.output
    assert "Streaming" not in result.output


def test_summary_custom_groups_need_a_group(cli_runner, cli_db_path):
    _add_signal(cli_runner, cli_db_path, *NETFLIX)

    result = _invoke(cli_runner, cli_db_path, "summary", "--group-by", "custom_groups")

    assert result.exit_code == 1
    assert "at least one named group" in result.output


@pytest.mark.parametrize("group", ["Fun", "=Streaming", "Fun=", "Fun= , "])
def test_summary_rejects_malformed_group(cli_runner, cli_db_path, group):
    result = _invoke(
        cli_runner, cli_db_path, "summary", "--group-by", "custom_groups", "--group", group,
    )

    assert result.exit_code == 1
    assert "Invalid group format: expected NAME=Category" in result.output


def test_summary_group_needs_custom_grouping(cli_runner, cli_db_path):
    result = _invoke(cli_runner, cli_db_path, "summary", "--group", "Fun=Streaming")

    assert result.exit_code == 1
    assert "--group only applies" in result.output


def test_import_dry_run_saves_nothing(cli_runner, cli_db_path, fixtures_dir):
    reply = str(fixtures_dir / "statement_reply.txt")

    result = _invoke(cli_runner, cli_db_path, "import", reply, "--dry-run")

    assert result.exit_code == 0, result.output
    assert "Would import 3 signals from 'statement_reply.txt'" in result.output
    assert "Whole Foods" in result.output
    assert "Skipped row 3" in result.output
    assert "No signals found." in _invoke(cli_runner, cli_db_path, "signal", "list").output
    assert "No documents found." in _invoke(cli_runner, cli_db_path, "document", "list").output


def test_import_review_drops_declined_signals(cli_runner, cli_db_path, fixtures_dir):
    reply = str(fixtures_dir / "statement_reply.txt")

    result = _invoke(cli_runner, cli_db_path, "import", reply, "--review", input="y\nn\n\n")

    assert result.exit_code == 0, result.output
    assert "Imported 2 signals from 'statement_reply.txt'" in result.output
    listed = _invoke(cli_runner, cli_db_path, "signal", "list").output
    assert "Acme Corp" in listed
    assert "Whole Foods" in listed
    assert "Netflix" not in listed
    assert "2 signals" in _invoke(cli_runner, cli_db_path, "document", "list").output


def test_import_review_cancelled_when_nothing_kept(cli_runner, cli_db_path, fixtures_dir):
    reply = str(fixtures_dir / "statement_reply.txt")

    result = _invoke(cli_runner, cli_db_path, "import", reply, "--review", input="n\nn\nn\nn\n")

    assert result.exit_code == 0, result.output
    assert "Import cancelled." in result.output
    assert "No documents found." in _invoke(cli_runner, cli_db_path, "document", "list").output


def test_import_dry_run_and_review_conflict(cli_runner, cli_db_path, fixtures_dir):
    reply = str(fixtures_dir / "statement_reply.txt")

    result = _invoke(cli_runner, cli_db_path, "import", reply, "--dry-run", "--review")

    assert result.exit_code == 1
    assert "cannot be combined" in result.output


@pytest.mark.parametrize(
    "name, value",
    [
        ("BURNRATE_PROJECTION_YEARS", "forever"),
        ("BURNRATE_PROJECTION_YEARS", "500"),
        ("BURNRATE_GROWTH_RATE", "high"),
    ],
)
def test_invalid_environment_setting_is_reported(cli_runner, cli_db_path, name, value):
    result = cli_runner.invoke(
        cli, ["--db-path", cli_db_path, "invest", "project"], env={name: value}
    )

    assert result.exit_code == 1
    assert f"Error: {name} must be" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)



def test_tax_commands(cli_runner, cli_db_path, fixtures_dir, tmp_path):
    imported = _invoke(cli_runner, cli_db_path, "tax", "import", str(fixtures_dir / "w2_reply.json"))
    assert imported.exit_code == 0, imported.output
    assert "Imported w2 'w2_reply.json' for 2023" in imported.output
    assert "State withholding looks high" in imported.output

    bill = tmp_path / "bill.json"
    bill.write_text(json.dumps({"docType": "property_tax", "data": {"propertyTaxAmount": 38000}}))
    assert _invoke(cli_runner, cli_db_path, "tax", "import", str(bill)).exit_code == 0

    listed = _invoke(cli_runner, cli_db_path, "tax", "list")
    assert "w2_reply.json" in listed.output
    assert "property_tax" in listed.output

    summary = _invoke(cli_runner, cli_db_path, "tax", "summary")
    assert "$84,500.00" in summary.output
    assert "$38,000.00" in summary.output

    strategy = _invoke(
        cli_runner, cli_db_path, "tax", "strategy",
        "--filing-status", "joint", "--children", "2", "--child-care", "6000",
    )
    assert strategy.exit_code == 0, strategy.output
    assert "$40,000.00" in strategy.output
    assert "Itemizing beats the standard deduction." in strategy.output
    assert "$5,200.00" in strategy.output


def test_tax_delete(cli_runner, cli_db_path, fixtures_dir):
    _invoke(cli_runner, cli_db_path, "tax", "import", str(fixtures_dir / "w2_reply.json"))

    result = _invoke(cli_runner, cli_db_path, "tax", "delete", "1", "--yes")

    assert "Deleted tax document 'w2_reply.json'" in result.output
    assert "No tax documents found." in _invoke(cli_runner, cli_db_path, "tax", "list").output


@pytest.mark.parametrize("status", ["single", "joint"])
def test_tax_strategy_without_documents(cli_runner, cli_db_path, status):
    result = _invoke(cli_runner, cli_db_path, "tax", "strategy", "--filing-status", status)

    assert result.exit_code == 0
    assert "The standard deduction is larger" in result.output


def test_help_ignores_invalid_environment_setting(cli_runner):
    result = cli_runner.invoke(cli, ["--help"], env={"BURNRATE_PROJECTION_YEARS": "forever"})

    assert result.exit_code == 0
    assert "BurnRate" in result.output
