"""Integration tests for end-to-end workflows."""

import csv

from tvdetrack.cli.main import cli


def test_full_workflow(cli_runner, temp_db, tmp_path):
    """Test complete workflow: platforms → vehicle → driver → add → summary → taxes → export."""
    args = ["--db-path", temp_db.database_path]

    # Step 1: Default platforms
    result = cli_runner.invoke(cli, args + ["init-platforms"])
    assert result.exit_code == 0, result.output
    assert "Created platform 'Uber' (commission 25%)" in result.output

    # Step 2: Vehicle and driver
    result = cli_runner.invoke(
        cli, args + ["vehicle", "create", "Toyota Corolla", "--plate", "aa-00-bb"]
    )
    assert result.exit_code == 0, result.output
    assert "[AA-00-BB]" in result.output

    result = cli_runner.invoke(
        cli, args + ["driver", "create", "Ana", "--vehicle", "Toyota Corolla"]
    )
    assert result.exit_code == 0, result.output

    # Step 3: Income gets tax estimates, expense keeps its VAT
    result = cli_runner.invoke(
        cli,
        args
        + [
            "add",
            "--driver",
            "Ana",
            "--platform",
            "Uber",
            "--date",
            "2025-03-10",
            "--amount",
            "100",
            "--description",
            "Semana 11",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Tax estimates:" in result.output
    assert "IVA (6%) sobre Semana 11: 5,66 €" in result.output

    result = cli_runner.invoke(
        cli,
        args
        + [
            "add",
            "--driver",
            "Ana",
            "--category",
            "combustivel",
            "--date",
            "2025-03-12",
            "--amount",
            "61,50",
            "--vat",
            "11,50",
            "--description",
            "Galp",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "VAT: 11,50 €" in result.output
    assert "Tax estimates:" not in result.output

    # Step 4: Listing shows the income, its three estimates and the expense
    result = cli_runner.invoke(
        cli,
        args + ["transaction", "list", "--start-date", "2025-03-01", "--end-date", "2025-03-31"],
    )
    assert result.exit_code == 0, result.output
    assert "Found 5 transaction(s)" in result.output

    # Step 5: Summary and taxes
    march = ["--start-date", "2025-03-01", "--end-date", "2025-03-31"]
    result = cli_runner.invoke(cli, args + ["summary"] + march)
    assert result.exit_code == 0, result.output
    assert "Period: 2025-03-01 to 2025-03-31" in result.output
    assert "100,00 €" in result.output
    assert "95,44 €" in result.output
    assert "4,56 €" in result.output

    result = cli_runner.invoke(cli, args + ["taxes"] + march)
    assert result.exit_code == 0, result.output
    assert "IVA a recuperar" in result.output
    assert "-5,84 €" in result.output
    assert "14,15 €" in result.output
    assert "14,13 €" in result.output

    # Step 6: An automatic backup was taken along the way
    result = cli_runner.invoke(cli, args + ["backup", "list", "--type", "auto"])
    assert result.exit_code == 0, result.output
    assert "| auto " in result.output

    # Step 7: Export
    export_path = tmp_path / "march.csv"
    result = cli_runner.invoke(
        cli, args + ["transaction", "export", str(export_path)] + march
    )
    assert result.exit_code == 0, result.output
    assert "Exported 5 transaction(s)" in result.output

    with export_path.open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 5
    income = next(row for row in rows if row["type"] == "income")
    assert income["platform"] == "Uber"
    assert income["driver"] == "Ana"
    derived = [row for row in rows if row["parent_id"] == income["id"]]
    assert {row["derived_kind"] for row in derived} == {
        "vat_on_income",
        "income_tax_estimate",
        "social_security_estimate",
    }


def test_restore_backup_workflow(cli_runner, temp_db):
    """Test that a manual backup brings back data deleted after it."""
    args = ["--db-path", temp_db.database_path]
    cli_runner.invoke(cli, args + ["init-platforms"])

    result = cli_runner.invoke(cli, args + ["backup", "create"])
    assert result.exit_code == 0, result.output
    backup_id = result.output.strip().split()[-1]

    result = cli_runner.invoke(cli, args + ["platform", "delete", "Bolt", "--yes"])
    assert result.exit_code == 0, result.output

    result = cli_runner.invoke(cli, args + ["backup", "restore", backup_id, "--yes"])
    assert result.exit_code == 0, result.output
    assert f"Restored backup {backup_id}" in result.output

    result = cli_runner.invoke(cli, args + ["platform", "list"])
    assert "Bolt" in result.output
