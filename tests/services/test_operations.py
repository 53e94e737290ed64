# tests/services/test_operations.py
import logging
import random
from io import BytesIO

import pytest

from fshelpers.domain.models import Operation, OperationOutcome
from fshelpers.services.content_store import ContentStore
from fshelpers.services.operations import FileOperations


@pytest.fixture
def store(tmp_path):
    s = ContentStore(tmp_path)
    s.init()
    return s


def _entry(store, seed=0, size=50_000):
    data = random.Random(seed).randbytes(size)
    return store.write(9, BytesIO(data), size)


def _ops(store, index=0, seed=1):
    return FileOperations(store, index, random.Random(seed))


def test_verify_read_ok(store):
    path = _entry(store)
    assert _ops(store).run(Operation.VERIFY_READ, path) is OperationOutcome.OK


def test_verify_read_reports_corruption(store, caplog):
    caplog.set_level(logging.INFO)
    path = _entry(store)
    raw = bytearray(path.read_bytes())
    raw[0] ^= 0x01
    path.write_bytes(bytes(raw))

    assert _ops(store, index=4).run(Operation.VERIFY_READ, path) is OperationOutcome.CORRUPT
    bad = [r for r in caplog.records if "bad hash" in r.getMessage()]
    assert len(bad) == 1
    assert bad[0].levelno == logging.WARNING
    assert bad[0].getMessage().startswith("04: bad hash for file ")


def test_range_read_leaves_file_untouched(store):
    path = _entry(store)
    before = path.read_bytes()
    ops = _ops(store)
    for _ in range(20):
        assert ops.run(Operation.RANGE_READ, path) is OperationOutcome.OK
    assert path.read_bytes() == before


def test_range_read_write_is_a_content_no_op(store):
    path = _entry(store, seed=3)
    before = path.read_bytes()
    ops = _ops(store, seed=5)
    for _ in range(20):
        assert ops.run(Operation.RANGE_READ_WRITE, path) is OperationOutcome.OK
    assert path.read_bytes() == before
    assert store.verify(path)


def test_write_new_replaces_reference(store):
    ref = _entry(store, seed=11, size=12_345)
    ops = _ops(store, index=2)

    assert ops.run(Operation.WRITE_NEW, ref) is OperationOutcome.OK
    assert not ref.exists()
    assert ops.files_written == 1
    assert ops.bytes_written == 12_345

    entries = list(store.iter_entries())
    assert len(entries) == 1
    assert entries[0].stat().st_size == 12_345
    assert store.verify(entries[0])
    assert list(store.staging_dir.iterdir()) == []


@pytest.mark.parametrize("op", list(Operation))
def test_missing_file_is_benign(store, op):
    gone = store.root / "abcd" / ("ab" * 32)
    assert _ops(store).run(op, gone) is OperationOutcome.MISSING


def test_other_os_errors_propagate(store, tmp_path):
    a_dir = tmp_path / "adir"
    a_dir.mkdir()
    with pytest.raises(OSError):
        _ops(store).run(Operation.VERIFY_READ, a_dir)
