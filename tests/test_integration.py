"""Integration tests for end-to-end workflows."""

import json
import re

from workshopmgr.cli.main import cli


def _id_from(output: str) -> str:
    match = re.search(r"ID: ([0-9a-f]+)", output)
    assert match, output
    return match.group(1)


def test_full_workflow(cli_runner, temp_db, tmp_path):
    """Test complete workflow: company → client → location → workshop → registration → payment → report → backup."""

    def run(*args):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])
        assert result.exit_code == 0, result.output
        return result.output

    # Step 1: Company profile
    run("company", "set", "--name", "Laboratori Creativi", "--vat", "0123",
        "--address", "Via Roma 1", "--email", "info@example.com")

    # Step 2: Client with two children
    parent_id = _id_from(
        run("client", "add", "--name", "Anna", "--surname", "Rossi", "--email", "anna.rossi@example.com")
    )
    luca_id = _id_from(run("child", "add", parent_id, "Luca", "--birth-date", "2018-05-12"))
    marta_id = _id_from(run("child", "add", parent_id, "Marta", "--birth-date", "2019-02-01"))

    # Step 3: Supplier, location and workshop
    supplier_id = _id_from(run("supplier", "add", "Comune di Milano"))
    location_id = _id_from(
        run("location", "add", supplier_id, "Biblioteca", "--address", "Via Dante 5", "--capacity", "1")
    )
    output = run("workshop", "add", "Piccoli Chef", "--type", "1 Mese", "--location", location_id,
                 "--start-date", "2024-10-01", "--start-time", "17:00", "--price", "80")
    assert "BBLT-MAR-17:00" in output
    workshop_id = _id_from(output)

    # Step 4: Registration; the single seat goes to Luca
    run("register", luca_id, workshop_id, "--date", "2024-09-20")
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "register", marta_id, workshop_id])
    assert result.exit_code == 1
    assert "is full (capacity 1)" in result.output

    # Step 5: Payment and cost
    run("payment", "add", parent_id, "80", "--date", "2024-10-01", "--method", "transfer",
        "--workshop", workshop_id)
    run("cost", "add", "Affitto", "40", "--date", "2024-10-08", "--supplier", supplier_id,
        "--location", location_id, "--workshop", workshop_id)

    # Step 6: Reports
    output = run("report", "show", "monthly", "--start-date", "2024-10-01", "--end-date", "2024-10-31")
    assert "2024-10" in output
    assert "40.00" in output

    output = run("report", "show", "performance", "--start-date", "2024-10-01", "--end-date", "2024-10-31")
    assert "Piccoli Chef" in output

    # Step 7: Backup and restore
    backup_path = tmp_path / "backup.json"
    run("backup", "export", str(backup_path))
    data = json.loads(backup_path.read_text(encoding="utf-8"))
    assert len(data["children"]) == 2
    assert data["companyProfile"]["companyName"] == "Laboratori Creativi"

    run("workshop", "delete", workshop_id, "--yes")
    assert "No registrations found." in run("registrations")

    output = run("backup", "import", str(backup_path), "--yes")
    assert "registrations: 1" in output
    assert "Luca" in run("registrations", "--workshop", workshop_id)
