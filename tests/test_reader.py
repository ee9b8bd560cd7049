import sys
import os
import logging
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import Transaction, TransactionType
from reader import parse_rows, read_transactions


def parse(*lines):
    return list(parse_rows(list(lines)))


class TestParseRows:
    def test_trims_whitespace_and_accepts_missing_amount(self):
        transactions = parse(
            "type, client, tx, amount",
            "deposit, 1, 1, 1.0",
            "dispute, 1, 1,",
            "resolve, 1, 1",
        )

        assert transactions == [
            Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=Decimal("1.0")),
            Transaction(TransactionType.DISPUTE, client_id=1, transaction_id=1),
            Transaction(TransactionType.RESOLVE, client_id=1, transaction_id=1),
        ]

    def test_type_is_case_insensitive(self):
        transactions = parse(
            "Type,Client,TX,Amount",
            "DEPOSIT,1,1,2",
            "Withdrawal,1,2,1",
        )

        assert [t.transaction_type for t in transactions] == [TransactionType.DEPOSIT, TransactionType.WITHDRAWAL]

    def test_drops_malformed_rows(self, caplog):
        with caplog.at_level(logging.WARNING):
            transactions = parse(
                "type, client, tx, amount",
                "despotic, 1, 23, 4.0",
                "withdrawal, 1.25, 1, 2",
                ", 25, 1, hello",
                "deposit, 1, 2, hello",
                "deposit, 1, 3, 4, 5",
                "deposit, 1",
                "deposit, -1, 4, 1",
            )

        assert transactions == []
        assert "table is empty" in caplog.text

    def test_drops_amount_type_mismatch(self):
        transactions = parse(
            "type, client, tx, amount",
            "deposit, 1, 23,",
            "withdrawal, 1, 24,",
            "dispute, 1, 23, 444.42",
            "resolve, 1, 23, 444.75",
            "chargeback, 1, 24, 999.9",
        )

        assert transactions == []

    @pytest.mark.parametrize("client, tx, valid", [
        ("65535", "4294967295", True),
        ("65536", "1", False),
        ("1", "4294967296", False),
        ("0", "0", True),
        ("1_000", "1", False),
        ("+1", "1", False),
    ])
    def test_id_ranges(self, client, tx, valid):
        transactions = parse("type, client, tx, amount", f"deposit, {client}, {tx}, 1")
        assert bool(transactions) is valid

    @pytest.mark.parametrize("amount", ["NaN", "inf", "-Infinity"])
    def test_non_finite_amounts_dropped(self, amount):
        assert parse("type, client, tx, amount", f"deposit, 1, 1, {amount}") == []

    def test_negative_amount_reaches_engine(self):
        transactions = parse("type, client, tx, amount", "deposit, 1, 1, -5")
        assert transactions[0].amount == Decimal("-5")

    def test_blank_lines_skipped(self):
        transactions = parse(
            "type, client, tx, amount",
            "",
            "deposit, 1, 1, 1",
            "",
        )
        assert len(transactions) == 1

    def test_empty_input(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse() == []
        assert "table is empty" in caplog.text

    def test_diagnostics_logger_used(self, caplog):
        diagnostics = logging.getLogger("test.reader.diagnostics")
        with caplog.at_level(logging.WARNING):
            list(parse_rows(["type, client, tx, amount", "bogus, 1, 1, 1"], diagnostics))
        assert {record.name for record in caplog.records} == {"test.reader.diagnostics"}


class TestReadTransactions:
    def test_reads_file_lazily(self, tmp_path):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text("type, client, tx, amount\ndeposit, 1, 1, 1.5\nwithdrawal, 1, 2, 0.5\n")

        transactions = read_transactions(str(csv_file))

        assert next(transactions).amount == Decimal("1.5")
        assert next(transactions).transaction_type == TransactionType.WITHDRAWAL
        assert list(transactions) == []

    def test_missing_file_fails_immediately(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_transactions(str(tmp_path / "nope.csv"))

    def test_byte_order_mark_is_skipped(self, tmp_path):
        csv_file = tmp_path / "excel.csv"
        csv_file.write_bytes(b"\xef\xbb\xbftype,client,tx,amount\ndeposit,1,1,10\n")

        transactions = list(read_transactions(str(csv_file)))

        assert transactions == [
            Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=Decimal("10")),
        ]

    def test_invalid_utf8_row_dropped(self, tmp_path, caplog):
        csv_file = tmp_path / "test.csv"
        csv_file.write_bytes(b"type,client,tx,amount\ndeposit,1,1,10\ndeposit,1,2,\xff5\ndeposit,1,3,2\n")

        with caplog.at_level(logging.WARNING):
            transactions = list(read_transactions(str(csv_file)))

        assert [t.transaction_id for t in transactions] == [1, 3]
        assert "line 3 is not valid UTF-8" in caplog.text

    def test_oversized_field_row_dropped(self, tmp_path, caplog):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text(
            "type,client,tx,amount\n"
            "deposit,1,1,10\n"
            f"deposit,1,2,{'9' * 200000}\n"
            "deposit,1,3,2\n"
        )

        with caplog.at_level(logging.WARNING):
            transactions = list(read_transactions(str(csv_file)))

        assert [t.transaction_id for t in transactions] == [1, 3]
        assert "could not be read" in caplog.text


class TestHeader:
    def test_byte_order_mark_in_lines(self):
        transactions = parse("\ufefftype,client,tx,amount", "deposit,1,1,10")
        assert len(transactions) == 1
