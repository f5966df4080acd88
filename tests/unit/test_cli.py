"""
CLI Tests

Drives airdrop_cli.main.main() end to end against a file-backed store
in a temporary directory.
"""
import json
import os

import pytest

from airdrop_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    main,
)

from fixtures.common import ADDR_A, ADDR_B, ADDR_C, DISTRIBUTION_CONTRACT


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Isolated cwd/home with no AIRDROP_* environment."""
    for name in list(os.environ):
        if name.startswith("AIRDROP_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def csv_file(workdir):
    path = workdir / "recipients.csv"
    path.write_text(f"address,amount\n{ADDR_A},1000\n{ADDR_B},500\nbroken,1\n")
    return path


def _run(capsys, *argv):
    code = main(["--store", "store", *argv])
    captured = capsys.readouterr()
    return code, captured.out, captured.err


def _build(capsys, csv_file, *extra):
    code, out, _ = _run(capsys, "build", str(csv_file), "--json", *extra)
    assert code == EXIT_SUCCESS
    return json.loads(out)


class TestBuildCommand:
    """Tests for `airdrop build`."""

    def test_build_json(self, capsys, csv_file):
        summary = _build(capsys, csv_file)
        assert summary["recipients"] == 2
        assert summary["total_amount"] == "1500"
        assert summary["skipped"] == ["line 4: invalid address format: broken"]

    def test_build_text(self, capsys, csv_file):
        code, out, _ = _run(capsys, "build", str(csv_file))
        assert code == EXIT_SUCCESS
        assert "Recipients:   2" in out
        assert "Skipped 1 row(s)" in out

    def test_build_persists(self, capsys, csv_file, workdir):
        summary = _build(capsys, csv_file)
        assert (workdir / "store" / f"distribution__record__{summary['root']}.json").exists()

    def test_build_with_contract(self, capsys, csv_file):
        summary = _build(capsys, csv_file, "--contract", DISTRIBUTION_CONTRACT)
        assert summary["distribution_contract"] == DISTRIBUTION_CONTRACT

    def test_build_nothing_valid(self, capsys, workdir):
        path = workdir / "bad.csv"
        path.write_text("nope,1\n")
        code, _, err = _run(capsys, "build", str(path))
        assert code == EXIT_RUNTIME_ERROR
        assert "EMPTY_RECIPIENTS" in err

    def test_build_duplicates(self, capsys, workdir):
        path = workdir / "dup.csv"
        path.write_text(f"{ADDR_A},100\n{ADDR_A},200\n")
        code, _, err = _run(capsys, "build", str(path))
        assert code == EXIT_RUNTIME_ERROR
        assert "DUPLICATE_RECIPIENT" in err

    def test_missing_file(self, capsys, workdir):
        code, _, err = _run(capsys, "build", str(workdir / "absent.csv"))
        assert code == EXIT_RUNTIME_ERROR
        assert "Error" in err


class TestProofCommands:
    """Tests for `airdrop proof` and `airdrop verify`."""

    def test_proof_then_verify(self, capsys, csv_file):
        root = _build(capsys, csv_file)["root"]

        code, out, _ = _run(capsys, "proof", root, ADDR_A, "--json")
        assert code == EXIT_SUCCESS
        found = json.loads(out)
        assert found["amount"] == "1000"

        code, out, _ = _run(capsys, "verify", root, ADDR_A, "1000", ",".join(found["proof"]))
        assert code == EXIT_SUCCESS
        assert out.strip() == "VALID"

    def test_verify_wrong_amount(self, capsys, csv_file):
        root = _build(capsys, csv_file)["root"]
        _, out, _ = _run(capsys, "proof", root, ADDR_A, "--json")
        proof = json.loads(out)["proof"]
        code, out, _ = _run(capsys, "verify", root, ADDR_A, "999", json.dumps(proof))
        assert code == EXIT_VERIFICATION_FAILED
        assert out.strip() == "INVALID"

    def test_verify_unparseable_proof(self, capsys, workdir):
        code, _, err = _run(capsys, "verify", "0x" + "00" * 32, ADDR_A, "1", "not-a-hash")
        assert code == EXIT_RUNTIME_ERROR
        assert "PROOF_PARSE_ERROR" in err

    def test_proof_by_contract(self, capsys, csv_file):
        root = _build(capsys, csv_file)["root"]
        code, _, _ = _run(capsys, "alias", root, DISTRIBUTION_CONTRACT)
        assert code == EXIT_SUCCESS
        code, out, _ = _run(capsys, "proof", DISTRIBUTION_CONTRACT, ADDR_B)
        assert code == EXIT_SUCCESS
        assert "Amount:  500" in out

    def test_proof_not_found(self, capsys, csv_file):
        root = _build(capsys, csv_file)["root"]
        code, _, err = _run(capsys, "proof", root, ADDR_C)
        assert code == EXIT_RUNTIME_ERROR
        assert "supplied manually" in err


class TestExportImport:
    """Tests for `airdrop export` and `airdrop import`."""

    def test_export_import_roundtrip(self, capsys, csv_file, workdir):
        root = _build(capsys, csv_file, "--contract", DISTRIBUTION_CONTRACT)["root"]
        out_path = workdir / "record.json"
        code, _, _ = _run(capsys, "export", root, "--out", str(out_path))
        assert code == EXIT_SUCCESS

        code = main(["--store", "other", "import", str(out_path), "--json"])
        imported = json.loads(capsys.readouterr().out)
        assert code == EXIT_SUCCESS
        assert imported["root"] == root
        assert imported["distribution_contract"] == DISTRIBUTION_CONTRACT

    def test_import_invalid(self, capsys, workdir):
        path = workdir / "bad.json"
        path.write_text('{"root": "0x00"}')
        code, _, err = _run(capsys, "import", str(path))
        assert code == EXIT_RUNTIME_ERROR
        assert "RECORD_IMPORT_INVALID" in err


class TestConfigCommand:
    """Tests for `airdrop config`."""

    def test_init_and_show(self, capsys, workdir):
        code = main(["config", "--init"])
        capsys.readouterr()
        assert code == EXIT_SUCCESS
        assert (workdir / "airdrop.yaml").exists()

        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR
        capsys.readouterr()

        assert main(["config", "--show"]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["store"]["backend"] == "file"

    def test_no_command(self, capsys, workdir):
        assert main([]) == EXIT_RUNTIME_ERROR
